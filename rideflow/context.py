"""Wiring of the RideFlow store, services and event bus."""

import random
from datetime import datetime
from typing import Callable, Optional

from rideflow import config
from rideflow.services.analytics_service import AnalyticsService
from rideflow.services.auth_service import AuthService
from rideflow.services.events import EventBus
from rideflow.services.ride_service import RideService
from rideflow.storage import JsonFileStore
from rideflow.timeutil import utc_now


class AppContext:
    """
    Explicit application state handed to whatever drives the services.

    Args:
        store: Persistent store; a JsonFileStore at config.DATA_FILE by default
        rng: Randomness source for ride synthesis
        clock: Returns the current time as an aware datetime
        window_days: Default analytics window
    """

    def __init__(self, store=None, rng: Optional[random.Random] = None,
                 clock: Callable[[], datetime] = utc_now, window_days: int = None):
        self.store = store if store is not None else JsonFileStore(config.DATA_FILE)
        self.store.initialize()
        self.events = EventBus()
        self.auth = AuthService(self.store, self.events)
        self.rides = RideService(self.store, self.auth, self.events, rng=rng, clock=clock)
        self.analytics = AnalyticsService(self.rides, self.auth, clock=clock,
                                          window_days=window_days)
        self.analytics.attach(self.events)
