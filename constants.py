RESPONSE_VOICE = False
ECHO_LOG = True

TICK_INTERVAL_MS = 800
SIM_SPEED = 1.0
MAX_TICKS = None

LOG_DIR = "logs"
LOG_RETENTION_DAYS = 30
LOG_HISTORY_LIMIT = 500
ERROR_LOG_FILE = "error_log.txt"

AIRPORT_DEFAULT_NAME = "Airtime International"
AIRPORT_DEFAULT_ICAO = "ATIM"
STARTING_BALANCE = 5000.0
GOLD_PER_TICK = 1.0
STARTING_RUNWAY_TIERS = (1, 2)

# ==== Flights ====
FLIGHT_CANCEL_DELAY_THRESHOLD = 30
CRITICAL_DELAY_TICKS = 20
NO_RUNWAY_RETRY_DELAY = 5

FLIGHT_TYPES = ("COMMERCIAL", "CARGO", "VIP", "EMERGENCY")
FLIGHT_PRIORITIES = ("STANDARD", "VIP", "EMERGENCY")

PLANE_SIZES = ("SMALL", "MEDIUM", "LARGE")
REQUIRED_RUNWAY_LENGTH = {
    "SMALL": 1000,
    "MEDIUM": 1500,
    "LARGE": 2000,
}

# ==== Runways ====
# tier: (default name, length m, base landing duration ticks)
RUNWAY_TIERS = {
    1: {"name": "01L", "length": 1200, "landing_duration": 3},
    2: {"name": "02R", "length": 2000, "landing_duration": 4},
    3: {"name": "03L", "length": 5000, "landing_duration": 5},
}

WEAR_INCREMENT_PER_LANDING = 10
WEAR_RANDOM_MAX = 5
WEATHER_IMPACT_MULTIPLIER = 5
CRITICAL_WEAR_THRESHOLD = 50
FULL_DEGRADATION_THRESHOLD = 100
MAX_WEAR = 100
REPAIR_DURATION = 10
REPAIR_BASE_RATE = 15.0
REPAIR_HIGH_WEAR_LEVEL = 80
REPAIR_HIGH_WEAR_MULTIPLIER = 1.3
MAX_WEATHER_RESISTANCE = 0.9
TRAFFIC_PER_FLIGHT = 1

# ==== Weather ====
WEATHER_CHANGE_INTERVAL = 30
# (upper bound of d100 roll, weather, wear impact)
WEATHER_TABLE = (
    (50, "CLEAR", 0),
    (70, "RAINY", 1),
    (85, "FOGGY", 2),
    (95, "SNOWY", 3),
    (100, "STORMY", 5),
)

# ==== Revenue ====
BASE_FARES = {
    "COMMERCIAL": 10.0,
    "CARGO": 7.5,
    "VIP": 20.0,
    "EMERGENCY": 15.0,
}
TICKS_PER_PENALTY_PERIOD = 10
PENALTY_PER_PERIOD = 0.05
MAX_DELAY_PENALTY = 0.40
ON_TIME_BONUS_PER_PASSENGER = 1.0
PERFECT_LANDING_BONUS_PER_PASSENGER = 2.0
SPECIAL_FLIGHT_MULTIPLIER = 2.0

# ==== Failures ====
FAILURE_THRESHOLDS = {
    "EMERGENCY_RESPONSE": 3,
    "RUNWAY_CLOSURE": 5,
    "CRITICAL_DELAY": 10,
    "FLIGHT_CANCELLATION": 7,
    "FINANCIAL_SHORTFALL": 3,
}
FAILURE_REASONS = {
    "EMERGENCY_RESPONSE": "Too many emergency flights were lost",
    "RUNWAY_CLOSURE": "Too many runways were closed by wear",
    "CRITICAL_DELAY": "Too many flights were critically delayed",
    "FLIGHT_CANCELLATION": "Too many flights were cancelled",
    "FINANCIAL_SHORTFALL": "The airport ran out of money",
}

EMERGENCY_RESPONSE_WINDOW = 20

# ==== Generation ====
GENERATION_INTERVAL = 12
FLIGHTS_PER_RUNWAY = 2.5
SCHEDULE_OFFSET_RANGE = (5, 15)
PASSENGER_RANGE = (50, 300)
WEIGHT_RANGE = (10000, 80000)
SPECIAL_FLIGHT_PROBABILITY = 0.05
EMERGENCY_FLIGHT_PROBABILITY = 0.05

# ==== Progression ====
LEVEL_REQUIREMENTS_BASE = {1: 0, 2: 825, 3: 3500}
LEVEL_REQUIREMENT_GROWTH = 1.8
MAX_LEVEL = 20
LEVEL_UP_GOLD_BONUS = 1000

BASE_XP = {"COMMERCIAL": 10, "CARGO": 15, "VIP": 25, "EMERGENCY": 40}
XP_SIZE_MULTIPLIER = {"SMALL": 1.0, "MEDIUM": 1.5, "LARGE": 2.5}
XP_PRIORITY_MULTIPLIER = {"STANDARD": 1.0, "VIP": 1.5, "EMERGENCY": 2.0}
XP_WEATHER_MULTIPLIER = {"CLEAR": 1.0, "RAINY": 1.2, "FOGGY": 1.5, "SNOWY": 1.8, "STORMY": 2.5}
XP_ON_TIME_BONUS = 5
XP_PERFECT_BONUS = 10
XP_SIMULTANEOUS_BONUS = 15

TICKS_PER_GAME_HOUR = 6
NIGHT_HOURS = (22, 6)

ACHIEVEMENT_THRESHOLDS = {
    "FLIGHT_TYPE": (10, 30, 100, 500, 1000, 5000),
    "PERFECT_LANDINGS": (5, 20, 50, 200, 500, 1000),
    "RUNWAY_EXPERT": (10, 30, 60, 120, 240, 500),
    "NIGHT_FLIGHT": (10, 25, 50, 100, 200),
    "CONSECUTIVE_FLIGHTS": (5, 15, 30, 50, 100),
    "SIMULTANEOUS_FLIGHTS": (3, 5, 8, 12, 15),
    "EMERGENCY_LANDINGS": (3, 10, 25, 50, 100),
}
WEATHER_MASTER_THRESHOLDS = {
    "RAINY": (5, 15, 50, 150),
    "FOGGY": (3, 10, 30, 100),
    "SNOWY": (3, 10, 30, 100),
    "STORMY": (2, 5, 15, 50),
}
PASSENGER_MILESTONE_EXPONENTS = (6, 20)
PASSENGER_MILESTONE_TITLES = {
    6: "First Steps",
    7: "Taking Off",
    8: "Regional Hub",
    9: "People Mover",
    10: "Terminal Bustle",
    11: "Thousand Club",
    12: "People Planet",
    13: "Passenger Paradise",
    14: "Aviation Empire",
    15: "Skybound Metropolis",
    16: "Global Gateway",
    17: "Passenger Kingdom",
    18: "Interstellar Terminal",
    19: "Galactic Transport",
    20: "Universal Transit Hub",
}
WORN_RUNWAY_WEAR = 50

# reward per tier
ACHIEVEMENT_REWARDS = {
    "FLIGHT_TYPE": 0.10,
    "PERFECT_LANDINGS": 0.10,
    "RUNWAY_EXPERT": 0.10,
    "PASSENGER_MILESTONE": 0.05,
    "WEATHER_MASTER": 0.05,
    "NIGHT_FLIGHT": 0.075,
    "CONSECUTIVE_FLIGHTS": 0.075,
    "SIMULTANEOUS_FLIGHTS": 0.05,
    "EMERGENCY_LANDINGS": 0.15,
}

# ==== Host ====
PERFORMANCE_REPORT_INTERVAL = 60
RECENT_LOG_LINES = 8

CMD_LAND_TOKENS = ("L", "LAND")
CMD_DELAY_TOKENS = ("D", "DELAY", "HOLD")
CMD_AUTO_TOKENS = ("A", "AUTO")

MSG_NO_INPUT = "No input, delaying."
MSG_RUNWAY_NOT_FOUND = "Runway {rwy} not found"
MSG_RUNWAY_NOT_ELIGIBLE = "Runway {rwy} cannot accept this aircraft"
MSG_UNKNOWN_COMMAND = "Unknown command '{cmd}'"
MSG_LAND_CLEARANCE = "Cleared to land runway {rwy}"
MSG_DELAY = "Hold, expect further clearance"
MSG_AUTO = "Auto-select runway"

AIRLINES = {
    "British Airways": {
        "IATA": "BA",
        "ICAO": "BAW",
        "Callsign": "Speedbird",
    },
    "EasyJet": {
        "IATA": "U2",
        "ICAO": "EZY",
        "Callsign": "Easy",
    },
    "Loganair": {
        "IATA": "LM",
        "ICAO": "LOG",
        "Callsign": "Logan",
    },
    "Ryanair": {
        "IATA": "RK",
        "ICAO": "RUK",
        "Callsign": "Bluemax",
    },
    "Wizz Air": {
        "IATA": "W9",
        "ICAO": "WUK",
        "Callsign": "Wizz Go",
    },
}

HELP_TEXT = """
Runway selection:
  L <RWY>   land on runway <RWY>
  <N>       land on the N-th listed runway
  D         delay the flight
  A         let the tower pick a runway
Console:
  P         pause / resume
  M         toggle automatic / manual landings
  S <X>     set sim speed multiplier
  R <RWY>   repair runway
  R         repair every worn runway you can afford
  F         schedule one extra flight now
  V         toggle voice read-back
  I         airport status
  H         this help
  Q         quit
"""
