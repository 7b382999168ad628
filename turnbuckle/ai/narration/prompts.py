"""Prompt templates for match narration."""

from turnbuckle.core.enums import MatchFinish
from turnbuckle.core.models import MatchResult

NARRATOR_SYSTEM = """You are a veteran professional-wrestling play-by-play announcer.
Recap the match you are given for a results page.

Guidelines:
- 3-5 sentences, past tense
- Name the winner and how they won
- Mention any interference and the stipulation if there was one
- Match the energy to the star rating (a 1-star match was a dud, 5 stars a classic)
- Never invent title changes or injuries that are not in the facts
"""


def _stars(rating: float) -> str:
    return f"{rating:.2f} stars"


def build_match_prompt(result: MatchResult) -> str:
    """Serialize a resolved match into the facts the narrator may use."""
    lines = [
        f"Match: {' vs '.join(team.name for team in result.teams)}",
        f"Type: {result.match_type.display_name}",
    ]
    if result.stipulation and not result.stipulation.is_standard:
        lines.append(f"Stipulation: {result.stipulation.name}")
    finish = "disqualification" if result.finish == MatchFinish.DISQUALIFICATION else "pinfall"
    lines.append(f"Winner: {result.winning_team.name} by {finish}")
    lines.append(f"Length: {result.duration_minutes} minutes")
    lines.append(f"Quality: {_stars(result.rating)}")
    if result.win_probability < 0.4:
        lines.append("Note: this was an upset")
    for attempt in result.interference:
        lines.append(f"Interference: {attempt.message}")
    return "\n".join(lines)
