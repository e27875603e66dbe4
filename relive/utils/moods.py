"""
Mood palette shared by the composer, the gallery and the dashboard charts.
"""
from typing import Dict, Optional

MOODS = [
    {"emoji": "😊", "label": "Happy", "color": "#B5D99C"},
    {"emoji": "😌", "label": "Calm", "color": "#8dd3c7"},
    {"emoji": "😍", "label": "Loved", "color": "#ff9a8b"},
    {"emoji": "😔", "label": "Sad", "color": "#A8B5E8"},
    {"emoji": "😢", "label": "Crying", "color": "#9BB5E8"},
    {"emoji": "😡", "label": "Angry", "color": "#E07A5F"},
    {"emoji": "😴", "label": "Tired", "color": "#C8B8DB"},
    {"emoji": "🤔", "label": "Thoughtful", "color": "#3498db"},
    {"emoji": "😎", "label": "Cool", "color": "#FFD56F"},
    {"emoji": "🥳", "label": "Excited", "color": "#FFB5E8"},
    {"emoji": "😰", "label": "Anxious", "color": "#D4A5A5"},
    {"emoji": "🤗", "label": "Grateful", "color": "#B8E8D4"},
    {"emoji": "❤️", "label": "Loved", "color": "#ff9a8b"},
    {"emoji": "😂", "label": "Happy", "color": "#B5D99C"},
]

OTHER_LABEL = "Other"
OTHER_COLOR = "#cbd5e0"

_BY_EMOJI: Dict[str, dict] = {mood["emoji"]: mood for mood in MOODS}


def mood_label(emoji: Optional[str]) -> Optional[str]:
    if not emoji:
        return None
    return _BY_EMOJI.get(emoji, {}).get("label", OTHER_LABEL)


def mood_color(emoji: Optional[str]) -> Optional[str]:
    if not emoji:
        return None
    return _BY_EMOJI.get(emoji, {}).get("color", OTHER_COLOR)
