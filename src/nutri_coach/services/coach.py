"""AI coaching advice and chat."""

import logging
from dataclasses import dataclass
from typing import Protocol

from nutri_coach.domain.coach import ChatMessage, ChatRole
from nutri_coach.domain.meals import Meal
from nutri_coach.domain.profiles import UserRecord
from nutri_coach.services.aggregation import aggregate

_logger = logging.getLogger(__name__)

ADVICE_FALLBACK = "Advice could not be loaded right now."
CHAT_FALLBACK = "Sorry, I'm having trouble connecting. Please try again shortly."


class CoachClient(Protocol):
    """Interface for free-text LLM replies."""

    async def reply(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        instructions: str,
        messages: list[ChatMessage],
    ) -> str:
        """Return the model's reply to the conversation."""


@dataclass
class CoachService:
    """Coaching text with static fallbacks on any client failure."""

    client: CoachClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def advice(self, user: UserRecord, meals_today: list[Meal]) -> str:
        """Return a short tip for the rest of the day."""
        prompt = advice_prompt(user, meals_today)
        text = await self._reply(
            user, [ChatMessage(role=ChatRole.USER, text=prompt)], action="advice"
        )
        return text or ADVICE_FALLBACK

    async def chat(
        self, user: UserRecord, transcript: list[ChatMessage], message: str
    ) -> str:
        """Continue the conversation with a new user message."""
        turns = [*transcript, ChatMessage(role=ChatRole.USER, text=message)]
        text = await self._reply(user, turns, action="chat")
        return text or CHAT_FALLBACK

    async def _reply(
        self, user: UserRecord, messages: list[ChatMessage], *, action: str
    ) -> str | None:
        try:
            text = await self.client.reply(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                instructions=system_instruction(user),
                messages=messages,
            )
        except Exception:
            _logger.exception("Coach %s failed", action)
            return None
        if not text or not text.strip():
            _logger.warning("Coach %s returned an empty reply", action)
            return None
        return text.strip()


def system_instruction(user: UserRecord) -> str:
    """Describe the user to the coach model."""
    profile = user.profile
    goals = user.daily_goals
    return (
        "You are NutriCoach AI, an expert and friendly nutrition coach.\n"
        f"Your job is to help the user, {profile.name}, reach their goal: "
        f"{user.goal.value}.\n"
        "User details:\n"
        f"- Age: {profile.age}\n"
        f"- Sex: {profile.gender.value}\n"
        f"- Height: {profile.height_cm} cm\n"
        f"- Initial weight: {profile.initial_weight_kg} kg\n"
        f"- Activity level: {user.activity_level.value}\n"
        f"- Preferences/allergies: {user.preferences or 'None specified'}\n"
        f"- Daily goals: {goals.calories} kcal, {goals.protein_g}g protein, "
        f"{goals.carbs_g}g carbs, {goals.fat_g}g fat.\n\n"
        "Be encouraging and positive. Give evidence-based advice in simple terms. "
        "Do not give medical advice; if asked for medical information, suggest "
        "consulting a doctor. Tailor your answers to the user's data."
    )


def advice_prompt(user: UserRecord, meals_today: list[Meal]) -> str:
    """Summarize today's intake for the advice request."""
    totals = aggregate(meals_today)
    name = user.profile.name
    if meals_today:
        summary = "Today's meals are: " + ", ".join(m.name for m in meals_today) + "."
    else:
        summary = "The user has not logged any meals today yet."
    return (
        f"The user {name} has eaten {round(totals.calories)} calories and "
        f"{round(totals.protein_g)}g of protein today. {summary}\n"
        f"Their daily goal is {user.daily_goals.calories} calories.\n"
        "Based on this, give a short (1-2 sentences) personalized, encouraging "
        "and practical tip for the rest of the day. Speak directly to the user "
        f'(e.g. "Hi {name}, ..."). Be concise and positive. Do not repeat the '
        "numbers given above."
    )
