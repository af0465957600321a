from constants import AIRLINES, TICKS_PER_GAME_HOUR, NIGHT_HOURS


def game_hour(tick: int, ticks_per_hour: int = TICKS_PER_GAME_HOUR) -> int:
    return (tick // ticks_per_hour) % 24


def game_time(tick: int, ticks_per_hour: int = TICKS_PER_GAME_HOUR) -> str:
    minutes = (tick % ticks_per_hour) * 60 // ticks_per_hour
    return f"{game_hour(tick, ticks_per_hour):02d}:{minutes:02d}"


def is_night_time(tick: int, night_hours=NIGHT_HOURS) -> bool:
    start, end = night_hours
    hour = game_hour(tick)
    return hour >= start or hour < end


def get_callsign_from_iata(flight_number: str) -> str:
    # First two characters are always the IATA prefix
    prefix = flight_number[:2].upper()
    number = flight_number[2:].lstrip("0")

    for airline, data in AIRLINES.items():
        if prefix == data["IATA"].upper():
            return f"{data['Callsign']} {number}"

    return flight_number
