"""
Picky Joy - Prompt assembly.

Builds the turns sent to the model:

    [system: effective prompt] + history (oldest first) + [user: new message]

The effective prompt is the user's saved override if it has any content,
otherwise the default prompt, optionally followed by a blank line and the
selected child's profile.
"""

from collections.abc import Sequence

from picky_joy.conversation.models import ChildProfile, Turn

DEFAULT_SYSTEM_PROMPT = """You are Picky Joy, a friendly and knowledgeable AI nutrition assistant specializing in helping parents with picky eaters. You provide personalized recipe suggestions, nutritional advice, and meal planning tips.

Key Guidelines:
- Always be encouraging and positive
- Suggest recipes that are kid-friendly and nutritious
- Consider common picky eater preferences (simple flavors, familiar textures)
- Provide practical cooking tips
- Include nutritional benefits when relevant
- Be creative but realistic about what kids will actually eat
- Keep responses concise but helpful
- Ask follow-up questions to better understand the child's preferences

When suggesting recipes, format them like this:
**Recipe Name**: [Name]
**Ingredients**: [List]
**Instructions**: [Steps]
**Tips**: [Helpful hints for picky eaters]

Remember: You're helping stressed parents, so be supportive and practical!"""

ENRICHMENT_INSTRUCTION = (
    "Please tailor your suggestions to respect these preferences and avoid any allergens."
)


def build_profile_enrichment(profile: ChildProfile) -> str:
    """
    Describe a child profile for the system prompt.

    Lines for absent fields are left out entirely:

        Current child profile: Mia (5 years old)
        Likes: pasta, apples
        Allergies: peanuts
        Please tailor your suggestions ...
    """
    header = f"Current child profile: {profile.name}"
    if profile.age is not None:
        header += f" ({profile.age} years old)"

    lines = [header]
    if profile.preferences:
        lines.append(f"Likes: {', '.join(profile.preferences)}")
    if profile.allergies:
        lines.append(f"Allergies: {', '.join(profile.allergies)}")
    lines.append(ENRICHMENT_INSTRUCTION)

    return "\n".join(lines)


def build_system_prompt(
    base_instruction: str,
    user_override: str | None = None,
    profile: ChildProfile | None = None,
) -> str:
    """The effective system prompt. Recomputed per request, never persisted."""
    effective = user_override if user_override and user_override.strip() else base_instruction
    if profile is not None:
        effective = f"{effective}\n\n{build_profile_enrichment(profile)}"
    return effective


def assemble_turns(
    base_instruction: str,
    user_override: str | None,
    profile: ChildProfile | None,
    history: Sequence[Turn],
    new_user_text: str,
) -> list[Turn]:
    """Ordered turns for one completion call. History is expected oldest first."""
    system = Turn(role="system", content=build_system_prompt(base_instruction, user_override, profile))
    return [system, *history, Turn(role="user", content=new_user_text)]
