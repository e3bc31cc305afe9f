# backend/travelling_trip/utils/share_text.py

import re
from typing import List, Optional

from travelling_trip.core.config_loader import settings
from travelling_trip.models.travel_models import Language, Location, TravelSuggestions


MARKUP_RE = re.compile(r"<[^>]+>")

LABELS = {
    "en": {
        "title": "Travel Plan for",
        "attractions": "🏛️ Must-See Attractions",
        "gems": "💎 Hidden Gems",
        "restaurants": "🍽️ Restaurants",
        "itinerary": "📅 Itinerary",
        "day": "Day",
        "advice": "💡 Practical Advice",
        "accommodation": "🏨 Recommended Accommodation",
        "source": "Found on",
    },
    "fr": {
        "title": "Plan de Voyage pour",
        "attractions": "🏛️ Attractions Incontournables",
        "gems": "💎 Trésors Cachés",
        "restaurants": "🍽️ Restaurants",
        "itinerary": "📅 Itinéraire",
        "day": "Jour",
        "advice": "💡 Conseils Pratiques",
        "accommodation": "🏨 Hébergement Recommandé",
        "source": "Trouvé sur",
    },
}


def strip_markup(text: str) -> str:
    return MARKUP_RE.sub("", text)


def _bullets(locations: List[Location]) -> List[str]:
    return [f"• {loc.title} - {loc.description}" for loc in locations]


def format_travel_plan_for_sharing(
    suggestions: TravelSuggestions,
    language: Language = "en",
    source_url: Optional[str] = None,
) -> str:
    """
    Plain-text summary suitable for a share sheet or the clipboard.

    Sections: attractions, hidden gems, restaurants (when present), the
    itinerary day by day, practical advice, accommodation and a source link.
    """
    labels = LABELS.get(language, LABELS["en"])
    lines = [f"{labels['title']} {suggestions.destination.name}", ""]

    lines.append(labels["attractions"])
    lines.extend(_bullets(suggestions.must_see_attractions))

    lines.append("")
    lines.append(labels["gems"])
    lines.extend(_bullets(suggestions.hidden_gems))

    if suggestions.restaurants:
        lines.append("")
        lines.append(labels["restaurants"])
        lines.extend(_bullets(suggestions.restaurants))

    lines.append("")
    lines.append(labels["itinerary"])
    for day in sorted(suggestions.itinerary, key=lambda d: d.day):
        lines.append(f"{labels['day']} {day.day}:")
        lines.extend(f"• {strip_markup(activity)}" for activity in day.activities)
        lines.append("")

    if suggestions.practical_advice:
        lines.append(labels["advice"])
        lines.append(suggestions.practical_advice)
        lines.append("")

    if suggestions.accommodation:
        lines.append(labels["accommodation"])
        lines.extend(_bullets(suggestions.accommodation))

    lines.append("")
    lines.append(f"{labels['source']} {source_url or settings.share_source_url}")
    return "\n".join(lines)
