"""Services implementing the RideFlow session, ride and analytics logic."""
