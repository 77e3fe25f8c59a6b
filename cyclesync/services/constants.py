"""
Constants and shared data for cycle-related services.
"""
from typing import Dict, List
from cyclesync.models.phase import PhaseType

DEFAULT_CYCLE_LENGTH = 28

# Number of most recent intervals feeding the rolling average
AVERAGE_WINDOW = 4

# Day-in-cycle boundaries for the phase estimate
FOLLICULAR_END_DAY = 12
OVULATION_START_DAY = 12
OVULATION_END_DAY = 16

# Days past the average cycle length before a period counts as late
LATE_THRESHOLD_DAYS = 5

# Ovulation is estimated this many days before the next period
LUTEAL_LENGTH_DAYS = 14
FERTILE_MARGIN_DAYS = 2

# Maximum absolute deviation from the average still reported as regular
REGULAR_VARIANCE_DAYS = 2

TREND_CHART_CYCLES = 6

NO_DATA_COLOR = "#EEEEEE"

PHASE_COLORS: Dict[PhaseType, str] = {
    PhaseType.MENSTRUAL: "#FF8DA1",
    PhaseType.FOLLICULAR: "#C8B6FF",
    PhaseType.OVULATION: "#B8E0D2",
    PhaseType.LUTEAL: "#FFD166",
    PhaseType.LATE: "#FF9F1C",
}

AFFIRMATIONS: Dict[PhaseType, List[str]] = {
    PhaseType.MENSTRUAL: [
        "It is productive to rest. You don't have to do it all today.",
        "Listen to your body. Slow down and recharge.",
        "Be gentle with yourself. You are doing enough."
    ],
    PhaseType.FOLLICULAR: [
        "Your potential is limitless today.",
        "Embrace your rising energy. Create something new!",
        "You are glowing from the inside out."
    ],
    PhaseType.OVULATION: [
        "You are magnetic and powerful.",
        "Confidence looks good on you.",
        "Connect with others and share your light."
    ],
    PhaseType.LUTEAL: [
        "Honor your boundaries. It's okay to say no.",
        "Your feelings are valid. Take care of your heart.",
        "Turn inward and find your calm."
    ],
    PhaseType.LATE: [
        "Breathe. Stressing won't help. Trust your body.",
        "Patience is a form of self-love."
    ]
}

PARTNER_MESSAGES: Dict[PhaseType, str] = {
    PhaseType.MENSTRUAL: (
        "Hey! I'm on Day 1 of my cycle. Operating on low power mode today. "
        "Warm hugs and snacks would be amazing. 🍫❤️"
    ),
    PhaseType.FOLLICULAR: "Feeling energized and creative today! Ready to take on the world. ✨",
    PhaseType.OVULATION: "Feeling super confident and high energy today! 🌟 Let's do something fun!",
    PhaseType.LUTEAL: (
        "I'm in my Luteal phase (pre-period). My social battery is a bit low "
        "and I might need some extra patience today. 🔋💛"
    ),
    PhaseType.LATE: "My period is a bit late and I'm feeling a little stressed about it. Just a heads up! 🤍"
}

DUE_TOMORROW_MESSAGE = "Your period is predicted to start tomorrow!"
