"""
Airport simulation errors.
Resource contention and bad controller input are handled in place and
never raise; these are for broken invariants and bad configuration.
"""

class AirportError(Exception):
    """Base class for all airport simulation errors"""
    pass

class InvalidSpeedError(AirportError, ValueError):
    """Clock speed multiplier must be positive"""
    def __init__(self, factor):
        self.factor = factor
        super().__init__(f"Speed multiplier must be positive: {factor}")

class UnknownRunwayError(AirportError, KeyError):
    def __init__(self, runway_name):
        self.runway_name = runway_name
        super().__init__(f"Unknown runway: {runway_name}")

    def __str__(self):
        return self.args[0]

class UnknownTierError(AirportError, ValueError):
    def __init__(self, tier):
        self.tier = tier
        super().__init__(f"Unknown runway tier: {tier}")

class UnknownFlightTypeError(AirportError, ValueError):
    def __init__(self, flight_type):
        self.flight_type = flight_type
        super().__init__(f"Unknown flight type: {flight_type}")

class UnknownFailureTypeError(AirportError, ValueError):
    def __init__(self, failure_type):
        self.failure_type = failure_type
        super().__init__(f"Unknown failure type: {failure_type}")

class InvalidModifierError(AirportError, ValueError):
    """Modifier values compose by multiplication and must stay positive"""
    def __init__(self, name, value, message="Invalid modifier value"):
        self.name = name
        self.value = value
        super().__init__(f"{message}: {name}={value}")

class InvalidAmountError(AirportError, ValueError):
    def __init__(self, amount, message="Amount must be positive"):
        self.amount = amount
        super().__init__(f"{message}: {amount}")
