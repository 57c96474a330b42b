"""
Demo rows served when the hosted backend is not configured or a query fails.

Shapes match the row dicts the services return, so callers never need to
special-case fallback content.
"""

FALLBACK_PROFILE = {
    "id": 0,
    "name": "Alex Johnson",
    "age": 24,
    "avatar_url": None,
    "positions": ["Forward", "Wing"],
    "skill_level": 8,
    "sports": ["Basketball", "Flag Football"],
    "about": (
        "Community player focused on team play and sportsmanship. "
        "Loves weekend tournaments and pickup games."
    ),
    "height_cm": None,
    "weight_lbs": None,
}

FALLBACK_PUBLIC_PROFILE = {
    "id": 0,
    "name": "Player",
    "age": None,
    "avatar_url": None,
    "positions": None,
    "skill_level": None,
    "sports": None,
    "about": "Community player focused on team play and sportsmanship.",
    "height_cm": None,
    "weight_lbs": None,
}

FALLBACK_TEAMS = [
    {"id": 1, "team_name": "Downtown Warriors", "role": "Captain", "logo_url": None},
    {"id": 2, "team_name": "City League All-Stars", "role": "Player", "logo_url": None},
]

FALLBACK_FRIENDS = [
    {"id": 101, "name": "Jordan Lee", "sport": "Basketball", "skill_level": 9, "avatar_url": None},
    {"id": 102, "name": "Sam Patel", "sport": "Flag Football", "skill_level": 7, "avatar_url": None},
    {"id": 103, "name": "Morgan Diaz", "sport": "Pickleball", "skill_level": 6, "avatar_url": None},
]

FALLBACK_EVENTS = [
    {
        "id": 1,
        "title": "3v3 Basketball Tournament",
        "start_date": "2024-03-15",
        "end_date": "2024-03-15",
        "time_info": "8:00 AM tip-off",
        "location": "Central Sports Complex",
        "description": "Fast-paced half-court games for every division.",
        "status": "scheduled",
        "host_type": "aldrich",
        "registration_program_slug": None,
        "image_url": None,
        "sport_slug": "basketball",
    },
    {
        "id": 2,
        "title": "Pickleball League",
        "start_date": "2024-03-20",
        "end_date": "2024-04-20",
        "time_info": "Weeknight doubles",
        "location": "Riverside Courts",
        "description": "Round-robin league with playoffs and prizes.",
        "status": "potential",
        "host_type": None,
        "registration_program_slug": None,
        "image_url": None,
        "sport_slug": "pickleball",
    },
    {
        "id": 3,
        "title": "Amputee Soccer Charity Exhibition",
        "start_date": "2024-08-03",
        "end_date": None,
        "time_info": None,
        "location": "Aldrich Complex, Laurel",
        "description": "Soccer playoffs plus an exhibition match fundraiser with raffles and local sponsors.",
        "status": "scheduled",
        "host_type": "featured",
        "registration_program_slug": None,
        "image_url": None,
        "sport_slug": "soccer",
    },
]

FALLBACK_SPORTS = [
    {"id": "baseball", "title": "Baseball", "players_per_team": 9, "gender": "open",
     "short_description": "Diamond leagues, tourneys, and skills."},
    {"id": "basketball", "title": "Basketball", "players_per_team": 5, "gender": "open",
     "short_description": "5v5 leagues, 3v3 nights, clinics."},
    {"id": "esports", "title": "Esports", "players_per_team": None, "gender": "open",
     "short_description": "Seasonal ladders and LAN nights."},
    {"id": "flag-football", "title": "Flag Football", "players_per_team": 7, "gender": "coed",
     "short_description": "Non-contact leagues and tourneys."},
    {"id": "golf", "title": "Golf", "players_per_team": 4, "gender": "open",
     "short_description": "Scrambles, outings, and skins."},
    {"id": "mini-golf", "title": "Mini-Golf", "players_per_team": 4, "gender": "open",
     "short_description": "Casual putt-putt meetups."},
    {"id": "pickleball", "title": "Pickleball", "players_per_team": 2, "gender": "coed",
     "short_description": "Leagues, ladders, and tournaments."},
    {"id": "run-club", "title": "Run Club", "players_per_team": 1, "gender": "open",
     "short_description": "Group runs and race prep."},
    {"id": "soccer", "title": "Soccer", "players_per_team": 11, "gender": "open",
     "short_description": "Leagues, pickup, and cups."},
    {"id": "youth-soccer", "title": "Youth Soccer", "players_per_team": 7, "gender": "coed",
     "short_description": "Small-sided youth play."},
]

SPORT_IMAGES = {
    "baseball": "/baseball/champst2025.jpeg",
    "basketball": "/basketball/champst2025.jpeg",
    "esports": "/esports/esports.jpg",
    "flag-football": "/football/flag.jpg",
    "golf": "/golf/golf.jpg",
    "mini-golf": "/golf/minigolf.jpg",
    "pickleball": "/PickleTourneyCourt6.png",
    "run-club": "/run/runclub.jpg",
    "soccer": "/forever5/newman5.png",
    "youth-soccer": "/forever5/newman5.png",
}

ACTIVITY_LABELS = {
    "baseball": "Leagues • Tournaments",
    "basketball": "Leagues • 3v3 • Clinics",
    "esports": "Ladders • LAN • Tournaments",
    "flag-football": "Leagues • Pickup • Tournaments",
    "golf": "Scrambles • Outings",
    "mini-golf": "Meetups",
    "pickleball": "Leagues • Tournaments",
    "run-club": "Group Runs • Races",
    "soccer": "Leagues • Pickup • Tournaments",
    "youth-soccer": "Leagues • Clinics",
}

DEFAULT_ACTIVITY_LABEL = "Leagues • Pickup • Tournaments"
