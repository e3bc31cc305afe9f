# backend/travelling_trip/agents/travel_agent.py

import json
from datetime import date
from typing import Dict, List, Optional, Protocol

from pydantic import ValidationError

from travelling_trip.core.errors import GenerationError
from travelling_trip.core.logger import logger
from travelling_trip.models.planning_models import (
    IdeaCategory,
    PreciseActivity,
    PreciseItineraryResponse,
    TravelPlanRequest,
)
from travelling_trip.models.travel_models import (
    DayItinerary,
    Language,
    Location,
    SuggestionsValidationError,
    TravelSuggestions,
    validate_locations,
    validate_travel_suggestions,
)
from travelling_trip.utils.structured_output import StructuredOutputError, decode_structured_output


PLAN_MAX_OUTPUT_TOKENS = 4000
PRECISE_MAX_OUTPUT_TOKENS = 8000
PRECISE_MAX_DAYS = 7
IDEAS_PER_REQUEST = 5


class TextGenerator(Protocol):
    def generate(self, prompt: str, max_output_tokens: Optional[int] = None) -> str:
        ...


# -------------------------------------------------------------------
# SCHEMAS (embedded verbatim in the prompts)
# -------------------------------------------------------------------
LOCATION_SCHEMA = """{
        "title": "string",
        "description": "string",
        "location": "string",
        "coordinates": {
          "lat": number,
          "lng": number
        }
      }"""

TRAVEL_PLAN_SCHEMA = f"""{{
    "destination": {{
      "name": "string",
      "coordinates": {{
        "lat": number,
        "lng": number
      }}
    }},
    "mustSeeAttractions": [
      {LOCATION_SCHEMA}
    ],
    "hiddenGems": [
      {LOCATION_SCHEMA}
    ],
    "restaurants": [
      {LOCATION_SCHEMA}
    ],
    "itinerary": [
      {{
        "day": number,
        "activities": [
          "string (format: 'Morning: XX:XX AM - Activity')",
          "string (format: 'Afternoon: XX:XX PM - Activity')",
          "string (format: 'Evening: XX:XX PM - Activity')"
        ]
      }}
    ],
    "practicalAdvice": "string",
    "accommodation": [
      {LOCATION_SCHEMA}
    ],
    "events": [
      {LOCATION_SCHEMA}
    ]
  }}"""

LOCATION_LIST_SCHEMA = f"""[
  {LOCATION_SCHEMA}
]"""

PRECISE_ITINERARY_SCHEMA = """{
    "itinerary": [
      {
        "day": number,
        "title": "string",
        "activities": [
          {
            "time": "string (format: 'Morning: XX:XX AM' or 'Matin: XXhXX')",
            "activity": "string",
            "place": "string",
            "nearbyLandmarks": ["string"],
            "bookingInfo": "string (or null if no booking required)",
            "travelTime": "string (e.g., '15 minutes by foot' or '15 minutes à pied')"
          }
        ]
      }
    ]
  }"""


# -------------------------------------------------------------------
# LANGUAGE HELPERS
# -------------------------------------------------------------------
def language_name(language: Language) -> str:
    return "French" if language == "fr" else "English"


def language_rule(language: Language) -> str:
    return "ALL text MUST be in French" if language == "fr" else "All text must be in English"


def format_start_date(value: date, language: Language) -> str:
    if language == "fr":
        return value.strftime("%d/%m/%Y")
    return f"{value.month}/{value.day}/{value.year}"


def activity_time_format(language: Language, with_activity: bool = True) -> str:
    if language == "fr":
        slots = ["Matin: XXhXX", "Après-midi: XXhXX", "Soir: XXhXX"]
        suffix = " - [Activité]"
    else:
        slots = ["Morning: XX:XX AM", "Afternoon: XX:XX PM", "Evening: XX:XX PM"]
        suffix = " - [Activity]"
    if not with_activity:
        suffix = ""
    return "\n   ".join(f'- "{slot}{suffix}"' for slot in slots)


IDEA_PROMPTS = {
    "activities": {
        "noun": "activities to do",
        "existing_label": "EXISTING ACTIVITIES",
        "subject": "activity",
        "focus": "Include a mix of indoor and outdoor activities",
        "never": "NEVER suggest any activities listed above",
    },
    "attractions": {
        "noun": "must-see attractions",
        "existing_label": "EXISTING ATTRACTIONS",
        "subject": "attraction",
        "focus": "Include iconic landmarks and cultural sites",
        "never": "NEVER suggest any attractions listed above",
    },
    "hiddenGems": {
        "noun": "hidden gems",
        "existing_label": "EXISTING HIDDEN GEMS",
        "subject": "hidden gem",
        "focus": "Focus on lesser-known, local spots that tourists might miss",
        "never": "NEVER suggest any places listed above",
    },
}


class TravelPlanAgent:
    """
    Builds prompts, calls the injected text generator and turns its free-text
    completion into validated records.

    - generate_travel_plan: full TravelSuggestions document
    - generate_more_ideas: 5 extra locations for one category
    - generate_precise_itinerary: itinerary re-planned with travel times
    """

    def __init__(self, llm: TextGenerator):
        self.llm = llm

    # -----------------------------
    # Shared JSON call
    # -----------------------------
    def generate_json_response(self, prompt: str, schema: str, max_output_tokens: int = PLAN_MAX_OUTPUT_TOKENS):
        full_prompt = f"""You are a travel assistant that generates JSON responses.

CRITICAL: YOU MUST FOLLOW THESE RULES EXACTLY
1. Return ONLY a valid JSON object
2. Do not include ANY text before or after the JSON
3. Do not include ANY markdown code blocks or backticks
4. Do not include ANY explanations or comments
5. The response must follow this exact schema:
{schema}

{prompt}"""

        logger.debug(f"Sending prompt to Gemini: {full_prompt}")
        text = self.llm.generate(full_prompt, max_output_tokens=max_output_tokens)
        logger.info(f"Raw response from Gemini ({len(text)} chars): {text[:500]}")

        try:
            return decode_structured_output(text)
        except StructuredOutputError as e:
            logger.error(f"Could not decode model output: {e}")
            raise GenerationError(str(e)) from e

    # -----------------------------
    # 1. Full travel plan
    # -----------------------------
    def build_travel_plan_prompt(self, request: TravelPlanRequest) -> str:
        destination = request.destination
        duration = request.duration
        language = request.language

        return f"""Create a travel plan for {destination}.

Key Information:
- Duration: {duration} days
- Start Date: {format_start_date(request.start_date, language)}
- Interests: {', '.join(request.interests)}
- Language: {language_name(language)}

Requirements:
1. Include exactly {duration} days in the itinerary
2. Each day must have exactly 3 activities
3. Use this time format:
   {activity_time_format(language)}
4. Include at least:
   - 5 must-see attractions
   - 5 hidden gems
   - 3 restaurants
   - 3 accommodation areas (districts or towns)
   - for practical advice: talk about transportation (how is public transport or taxis or need to rent a car) and weather at that period.
5. All locations must have accurate coordinates for {destination}
6. IMPORTANT: Never suggest the same place twice
7. All recommendations must relate to the specified interests
8. {language_rule(language)}"""

    def generate_travel_plan(self, request: TravelPlanRequest) -> TravelSuggestions:
        logger.info(
            f"Generating travel plan: destination={request.destination}, "
            f"duration={request.duration}, interests={request.interests}, language={request.language}"
        )
        data = self.generate_json_response(self.build_travel_plan_prompt(request), TRAVEL_PLAN_SCHEMA)

        try:
            suggestions = validate_travel_suggestions(data)
        except SuggestionsValidationError as e:
            logger.error(f"Invalid response structure from Gemini: {e.violations}")
            raise GenerationError(f"Invalid response structure from Gemini: {e}") from e

        logger.info(
            f"Travel plan ready for {suggestions.destination.name}: "
            f"{len(suggestions.itinerary)} days, {len(suggestions.must_see_attractions)} attractions, "
            f"{len(suggestions.hidden_gems)} hidden gems"
        )
        return suggestions

    # -----------------------------
    # 2. More ideas for one category
    # -----------------------------
    def build_more_ideas_prompt(
        self,
        destination: str,
        category: IdeaCategory,
        language: Language,
        existing: List[Location],
    ) -> str:
        wording = IDEA_PROMPTS[category]
        existing_titles = "\n".join(loc.title for loc in existing)

        return f"""Generate {IDEAS_PER_REQUEST} unique {wording['noun']} in {destination}.
Language: {language_name(language)}

{wording['existing_label']} (DO NOT REPEAT THESE):
{existing_titles}

Requirements:
1. Each {wording['subject']} must have a title, description, location, and coordinates
2. {wording['focus']}
3. {wording['never']}
4. IMPORTANT: Each {wording['subject']} must be completely unique and different from existing ones
5. Coordinates must be accurate for {destination}
6. {language_rule(language)}"""

    def generate_more_ideas(
        self,
        destination: str,
        category: IdeaCategory,
        language: Language = "en",
        existing: Optional[List[Location]] = None,
    ) -> List[Location]:
        existing = existing or []
        prompt = self.build_more_ideas_prompt(destination, category, language, existing)
        data = self.generate_json_response(prompt, LOCATION_LIST_SCHEMA)

        try:
            locations = validate_locations(data)
        except SuggestionsValidationError as e:
            logger.error(f"Invalid {category} list from Gemini: {e.violations}")
            raise GenerationError(f"Invalid response structure from Gemini: {e}") from e

        seen = {loc.title.strip().lower() for loc in existing}
        fresh = []
        for loc in locations:
            key = loc.title.strip().lower()
            if key in seen:
                logger.debug(f"Duplicate {category} skipped: {loc.title}")
                continue
            seen.add(key)
            fresh.append(loc)

        logger.info(f"{len(fresh)} new {category} for {destination} ({len(locations) - len(fresh)} duplicates dropped)")
        return fresh

    # -----------------------------
    # 3. Precise itinerary with travel times
    # -----------------------------
    def build_precise_itinerary_prompt(
        self,
        suggestions: TravelSuggestions,
        current_itinerary: Dict[int, List[str]],
        language: Language,
    ) -> str:
        base = [day.to_wire() for day in suggestions.itinerary]
        current = [
            {"day": day, "activities": activities}
            for day, activities in sorted(current_itinerary.items())
        ]
        num_days = min(len(suggestions.itinerary), PRECISE_MAX_DAYS)

        return f"""Optimize this travel itinerary for {suggestions.destination.name}:

Current base itinerary:
{json.dumps(base, indent=2, ensure_ascii=False)}

Current modified itinerary with user additions:
{json.dumps(current, indent=2, ensure_ascii=False)}

Requirements:
1. Generate EXACTLY {num_days} days
2. Each day MUST have AT LEAST 4 activities, and MUST INCLUDE ALL activities from the current modified itinerary
3. Group activities by geographic proximity and dispatch day by day
4. For each activity, provide:
   - The place name and description
   - At least 1 nearby landmark
   - Travel time and method from previous location
5. Each day should have a title summarizing the main theme or area
6. Use this time format:
   {activity_time_format(language, with_activity=False)}
7. {language_rule(language)}
8. IMPORTANT: Preserve all activities from the current modified itinerary"""

    @staticmethod
    def format_precise_activity(activity: PreciseActivity, language: Language) -> str:
        if language == "fr":
            nearby_label, travel_label, booking_label = "🏛️ À proximité", "🚶 Trajet", "📅 Réservation"
        else:
            nearby_label, travel_label, booking_label = "🏛️ Nearby", "🚶 Travel", "📅 Booking"

        text = f"{activity.time} - {activity.activity} (<b>{activity.place}</b>)"
        if activity.nearby_landmarks:
            text += f"\n   {nearby_label}: {', '.join(activity.nearby_landmarks)}"
        if activity.travel_time:
            text += f"\n   {travel_label}: {activity.travel_time}"
        if activity.booking_info:
            text += f"\n   {booking_label}: {activity.booking_info}"
        return text

    def generate_precise_itinerary(
        self,
        suggestions: TravelSuggestions,
        current_itinerary: Optional[Dict[int, List[str]]] = None,
        language: Language = "en",
    ) -> List[DayItinerary]:
        if current_itinerary is None:
            current_itinerary = {day.day: list(day.activities) for day in suggestions.itinerary}

        prompt = self.build_precise_itinerary_prompt(suggestions, current_itinerary, language)
        data = self.generate_json_response(prompt, PRECISE_ITINERARY_SCHEMA, PRECISE_MAX_OUTPUT_TOKENS)

        try:
            response = PreciseItineraryResponse.model_validate(data)
        except ValidationError as e:
            logger.error(f"Invalid precise itinerary from Gemini: {e}")
            raise GenerationError("Invalid response structure: missing or invalid itinerary array") from e

        days = sorted(response.itinerary, key=lambda d: d.day)[:PRECISE_MAX_DAYS]
        if len({d.day for d in days}) != len(days):
            raise GenerationError("Invalid response structure: duplicate day numbers in itinerary")

        logger.info(f"Precise itinerary for {suggestions.destination.name}: {len(days)} days")
        return [
            DayItinerary(
                day=d.day,
                activities=[self.format_precise_activity(a, language) for a in d.activities],
            )
            for d in days
        ]
