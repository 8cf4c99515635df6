"""Analytics service for RideFlow application."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from rideflow import config
from rideflow.models.ride import Ride, RideStatus, RideType
from rideflow.models.user import User
from rideflow.services.auth_service import AuthService
from rideflow.services.events import EventBus, ANALYTICS_UPDATED, RIDE_EVENTS, SESSION_CHANGED
from rideflow.services.ride_service import RideService
from rideflow.services.validation import ValidationError
from rideflow.timeutil import month_label, parse_datetime, utc_now

logger = logging.getLogger(__name__)


@dataclass
class TypeShare:
    """Number of rides of one type and their share of the window."""
    type: RideType
    count: int
    percentage: float


@dataclass
class Insight:
    title: str
    description: str


@dataclass
class AnalyticsReport:
    """
    Summary of a user's rides booked within a rolling window.

    Attributes:
        window_days: Length of the window, counted back from now by booking time
        total_rides: Rides booked in the window
        completed_rides: Completed rides among them
        total_spent: Sum of completed ride prices
        avg_cost: Average completed ride price, 0 without completed rides
        completion_rate: Completed share of all rides in percent, 0 without rides
        type_breakdown: Ride count per type over the whole window
        most_used_type: Type with the highest count, None without rides
        monthly_spending: Completed spend per month label of the scheduled time
        insights: Observations derived from the figures above
    """
    window_days: int
    total_rides: int = 0
    completed_rides: int = 0
    total_spent: float = 0
    avg_cost: float = 0
    completion_rate: float = 0
    type_breakdown: List[TypeShare] = field(default_factory=list)
    most_used_type: Optional[RideType] = None
    monthly_spending: Dict[str, float] = field(default_factory=dict)
    insights: List[Insight] = field(default_factory=list)


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def login_required_report(window_days: int = None) -> AnalyticsReport:
    """Placeholder report shown while nobody is logged in."""
    return AnalyticsReport(
        window_days=window_days or config.ANALYTICS_WINDOW_DAYS,
        insights=[Insight("Login Required", "Please login to view your analytics.")]
    )


class AnalyticsService:
    """Service deriving usage statistics from a user's ride history."""

    def __init__(self, rides: RideService, auth: AuthService,
                 clock: Callable[[], datetime] = utc_now,
                 window_days: int = None,
                 frequent_rider_threshold: int = None,
                 premium_avg_cost_threshold: float = None):
        self.rides = rides
        self.auth = auth
        self.clock = clock
        self.window_days = window_days or config.ANALYTICS_WINDOW_DAYS
        self.frequent_rider_threshold = (
            frequent_rider_threshold if frequent_rider_threshold is not None
            else config.FREQUENT_RIDER_THRESHOLD)
        self.premium_avg_cost_threshold = (
            premium_avg_cost_threshold if premium_avg_cost_threshold is not None
            else config.PREMIUM_AVG_COST_THRESHOLD)
        self.latest_report: Optional[AnalyticsReport] = None
        self._events: Optional[EventBus] = None

    def attach(self, events: EventBus) -> None:
        """Recompute the report whenever a ride or the session changes."""
        self._events = events
        for event in RIDE_EVENTS:
            events.subscribe(event, self._on_ride_event)
        events.subscribe(SESSION_CHANGED, self._on_session_changed)

    def compute_analytics(self, owner_id: str, window_days: int = None) -> AnalyticsReport:
        """
        Compute the analytics report for a user.

        Args:
            owner_id: ID of the user whose rides are analysed
            window_days: Only rides booked within this many days count

        Returns:
            AnalyticsReport: Statistics, breakdowns and insights

        Raises:
            ValidationError: If window_days is not a positive whole number
        """
        window_days = self.window_days if window_days is None else window_days
        if isinstance(window_days, bool) or not isinstance(window_days, int) or window_days < 1:
            raise ValidationError("The analytics window must be a positive number of days.")

        rides = self._rides_in_window(owner_id, window_days)
        completed = [r for r in rides if r.status is RideStatus.COMPLETED]

        report = AnalyticsReport(window_days=window_days)
        report.total_rides = len(rides)
        report.completed_rides = len(completed)
        report.total_spent = sum(r.price for r in completed)
        report.avg_cost = report.total_spent / len(completed) if completed else 0
        report.completion_rate = len(completed) * 100 / len(rides) if rides else 0
        report.type_breakdown = self._type_breakdown(rides)
        report.most_used_type = self._most_used_type(report.type_breakdown)
        report.monthly_spending = self._monthly_spending(completed)
        report.insights = self._insights(report)
        return report

    def for_current_user(self, window_days: int = None) -> AnalyticsReport:
        """Report for the logged-in user, or the login placeholder."""
        user = self.auth.current_user()
        if user is None:
            return login_required_report(window_days or self.window_days)
        return self.compute_analytics(user.id, window_days)

    def _on_ride_event(self, event: str, owner_id: str, **payload) -> None:
        self.latest_report = self.compute_analytics(owner_id)
        logger.debug(f"Analytics recomputed for user {owner_id} after {event}")
        self._publish(owner_id)

    def _on_session_changed(self, event: str, user: Optional[User] = None, **payload) -> None:
        if user is None:
            self.latest_report = login_required_report(self.window_days)
            self._publish(None)
            return
        self.latest_report = self.compute_analytics(user.id)
        logger.debug(f"Analytics recomputed for user {user.id} after {event}")
        self._publish(user.id)

    def _publish(self, owner_id: Optional[str]) -> None:
        if self._events is not None:
            self._events.publish(ANALYTICS_UPDATED, owner_id=owner_id, report=self.latest_report)

    def _rides_in_window(self, owner_id: str, window_days: int) -> List[Ride]:
        cutoff = self.clock() - timedelta(days=window_days)
        rides = []
        for ride in self.rides.get_user_rides(owner_id):
            try:
                created = parse_datetime(ride.created_at)
            except ValueError:
                logger.warning(f"Ride {ride.id} has an unreadable createdAt, leaving it out")
                continue
            if created >= cutoff:
                rides.append(ride)
        return rides

    @staticmethod
    def _type_breakdown(rides: List[Ride]) -> List[TypeShare]:
        breakdown = []
        for ride_type in RideType:
            count = sum(1 for r in rides if r.type is ride_type)
            if count:
                breakdown.append(TypeShare(ride_type, count, count * 100 / len(rides)))
        return breakdown

    @staticmethod
    def _most_used_type(breakdown: List[TypeShare]) -> Optional[RideType]:
        # max() keeps the first maximum, so ties go to the earlier enum member
        if not breakdown:
            return None
        return max(breakdown, key=lambda share: share.count).type

    @staticmethod
    def _monthly_spending(completed: List[Ride]) -> Dict[str, float]:
        # Grouped by month name only; rides from different years share a bucket
        months: Dict[str, float] = {}
        for ride in completed:
            try:
                label = month_label(parse_datetime(ride.date_time))
            except ValueError:
                logger.warning(f"Ride {ride.id} has an unreadable dateTime, leaving it out")
                continue
            months[label] = months.get(label, 0) + ride.price
        return months

    def _insights(self, report: AnalyticsReport) -> List[Insight]:
        insights = []

        if report.total_rides > 0:
            share = next(s for s in report.type_breakdown if s.type is report.most_used_type)
            insights.append(Insight(
                "Most Popular Ride Type",
                f"You prefer {share.type.value.capitalize()} rides, accounting for "
                f"{_round_half_up(share.percentage)}% of your bookings."
            ))

        if report.avg_cost > self.premium_avg_cost_threshold:
            insights.append(Insight(
                "Premium Preference",
                "Your average ride cost is above standard. "
                "Consider Economy rides for shorter trips to save money."
            ))

        if report.completed_rides >= self.frequent_rider_threshold:
            insights.append(Insight(
                "Frequent Rider",
                f"You've completed {report.completed_rides} rides. "
                f"Great job! Keep it up for loyalty rewards."
            ))

        if report.total_rides == 0:
            insights.append(Insight(
                "Get Started",
                "Book your first ride to start tracking your analytics and insights."
            ))

        return insights
