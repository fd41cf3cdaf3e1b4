"""Canned replies used when no data-driven intent matches."""

from __future__ import annotations

from typing import Dict, Tuple

# Checked in this order by substring containment; the first hit wins.
DEFAULT_KNOWLEDGE_BASE: Dict[str, str] = {
    "29 nov": "I have data for November 29th. Try: '29 Nov API data' or 'How was KL on 29 Nov?'",
    "air quality": "I have 1 month of daily API data. Which area or date are you interested in?",
    "api": "API stands for Air Pollutant Index. I can show historical trends since October 2025.",
    "exit": "Thank you for using Malaysia Air Pollutant AI. Stay safe!",
    "hello": "Hello! I am Malaysia Air Pollutant AI with 1-month historical data (Oct-Nov 2025).",
    "hi": (
        "Hi! I have daily API data. Ask me about specific dates like 'today', '29 Nov', "
        "or 'How was KL yesterday?'"
    ),
    "history": "I have data from October 29 to November 29, 2025. Ask about specific dates!",
    "malaysia": (
        "I have air quality data for Malaysia. You can ask about states like Selangor, "
        "Penang, Johor, etc."
    ),
    "pollution": (
        "I monitor air pollution levels across Malaysia. Try asking about a specific "
        "state or district."
    ),
    "quit": "Thank you for using Malaysia Air Pollutant AI. Breathe easy!",
    "today": "I can show you today's air quality data. Try: 'today api' or 'air quality today'",
    "trend": "I can show air quality trends. Try: 'trend in Kuala Lumpur' or 'compare months'",
}

DEFAULT_FALLBACK_RESPONSES: Tuple[str, ...] = (
    "I have daily air quality data. Try: 'today', '29 Nov', or 'How was Kuala Lumpur yesterday?'",
    "Ask me about specific dates like 'today's API' or 'air quality on November 29'",
    "Try: 'Show me data for 29 Nov' or 'How was Selangor today?'",
    "I can show air quality for any date between Oct 29 and Nov 29, 2025",
    "Ask about specific dates and areas like 'Kuala Lumpur on 29 November'",
)

FAREWELL_PHRASE = "quit"
