#!/usr/bin/env python3
"""
Daily dinner suggestion push notification.

Runs every hour. When the current hour in the configured time zone matches the hour
stored in settings/notifications, asks Claude for one dinner idea based on the recipe
catalog and pushes it to every registered browser, at most once per calendar day.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from .context import AppContext
from .models import DeliveryResult, JobOutcome, RecipeRecord, RegisteredDevice
from .services.push_service import STALE_TOKEN_ERRORS

# Create logger for this module
logger = logging.getLogger(__name__)

TOP_RECIPE_LIMIT = 15
TOP_RATING_THRESHOLD = 4
NOTIFICATION_BODY_LIMIT = 180
ELLIPSIS = '...'
FALLBACK_SUGGESTION = "How about revisiting one of your favorites tonight?"

SYSTEM_PROMPT = """You are a dinner suggestion assistant for Chris and Lindsay's private recipe catalog.
Suggest one specific dinner for tonight. Either revisit a recipe they love or propose something new that fits their taste.
Keep it very short: one sentence for the suggestion name and one sentence explaining why it fits tonight.
Do not include JSON or recipe tags. Be warm and direct."""

USER_PROMPT_TEMPLATE = """Their top-rated and favorite recipes:
{catalog_summary}

All recipe titles (for context, don't just repeat these):
{all_titles}

What should they make for dinner tonight?"""


def current_local_time(timezone_name: str, now: Optional[datetime] = None) -> datetime:
    """
    Current time in the given IANA zone.

    Args:
        timezone_name: e.g. 'America/New_York'
        now: Optional instant to convert instead of the wall clock; naive values are UTC
    """
    tz = ZoneInfo(timezone_name)
    if now is None:
        return datetime.now(tz)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(tz)


def rank_recipes(recipes: Sequence[RecipeRecord], limit: int = TOP_RECIPE_LIMIT) -> List[RecipeRecord]:
    """
    Favorites and recipes rated 4+, favorites first, then by rating (missing = 0).
    The sort is stable, so ties keep catalog order.
    """
    candidates = [
        r for r in recipes
        if r.favorite or (r.rating or 0) >= TOP_RATING_THRESHOLD
    ]
    candidates.sort(key=lambda r: (bool(r.favorite), r.rating or 0), reverse=True)
    return candidates[:limit]


def _format_rating(rating: Optional[float]) -> str:
    if not rating:
        return '?'
    if float(rating).is_integer():
        return str(int(rating))
    return str(rating)


def summarize_recipe(recipe: RecipeRecord) -> str:
    fav = ', fav' if recipe.favorite else ''
    tags = ', '.join(recipe.tags)
    return f"- {recipe.title} (★{_format_rating(recipe.rating)}{fav}, tags: {tags})"


def build_catalog_summary(top_recipes: Sequence[RecipeRecord]) -> str:
    return '\n'.join(summarize_recipe(r) for r in top_recipes) or '(none yet)'


def build_title_list(recipes: Sequence[RecipeRecord]) -> str:
    return ', '.join(r.title for r in recipes) or '(none)'


def build_prompt(recipes: Sequence[RecipeRecord]) -> Tuple[str, str]:
    """
    Build the system instruction and the user message for the suggestion request.

    Returns:
        (system_prompt, user_message)
    """
    user_message = USER_PROMPT_TEMPLATE.format(
        catalog_summary=build_catalog_summary(rank_recipes(recipes)),
        all_titles=build_title_list(recipes),
    )
    return SYSTEM_PROMPT, user_message


def extract_suggestion_text(response: Optional[Dict[str, Any]]) -> str:
    """Text of the first content block, or the fallback sentence when empty"""
    text = ''
    content = (response or {}).get('content')
    if isinstance(content, list) and content and isinstance(content[0], dict):
        text = content[0].get('text') or ''
    return text.strip() or FALLBACK_SUGGESTION


def truncate_for_notification(text: str, limit: int = NOTIFICATION_BODY_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[:limit - len(ELLIPSIS)] + ELLIPSIS


def find_stale_device_ids(
    devices: Sequence[RegisteredDevice],
    results: Sequence[DeliveryResult]
) -> List[str]:
    """
    Device ids whose token failed with a permanent error.
    Every device holding a dead token is returned, each id once.
    """
    dead_tokens = {
        r.token for r in results
        if not r.success and r.error_code in STALE_TOKEN_ERRORS
    }
    stale_ids = []
    for device in devices:
        if device.token in dead_tokens and device.id not in stale_ids:
            stale_ids.append(device.id)
    return stale_ids


def check_and_send_dinner_suggestion(context: AppContext, now: Optional[datetime] = None) -> JobOutcome:
    """
    Run one hourly check.

    Each unmet precondition ends the run with a 'skipped' outcome. Store, API and
    push failures are not caught here.

    Args:
        context: Config and collaborators
        now: Optional instant to evaluate the schedule against (defaults to the wall clock)

    Returns:
        JobOutcome describing what happened
    """
    config = context.config

    settings = context.settings_store.load()
    if settings is None:
        logger.info("[DinnerSuggestion] No notification settings found. Skipping.")
        return JobOutcome.skipped('no_settings')

    if not settings.enabled:
        logger.info("[DinnerSuggestion] Notifications disabled. Skipping.")
        return JobOutcome.skipped('disabled')

    local_now = current_local_time(config.timezone, now)
    today_str = local_now.date().isoformat()

    if local_now.hour != settings.hour:
        logger.info(
            f"[DinnerSuggestion] Hour mismatch: current={local_now.hour}, "
            f"configured={settings.hour} ({config.timezone}). Skipping."
        )
        return JobOutcome.skipped('hour_mismatch', today_str)

    if settings.last_sent == today_str:
        logger.info(f"[DinnerSuggestion] Already sent for {today_str}. Skipping.")
        return JobOutcome.skipped('already_sent', today_str)

    devices = context.device_registry.list_devices()
    tokens = [d.token for d in devices if d.token]
    if not tokens:
        logger.info(f"[DinnerSuggestion] No valid push tokens among {len(devices)} device(s). Skipping.")
        return JobOutcome.skipped('no_tokens', today_str)

    recipes = context.recipe_catalog.list_recipes()
    if not recipes:
        logger.info("[DinnerSuggestion] No recipes in catalog. Skipping.")
        return JobOutcome.skipped('no_recipes', today_str)

    system_prompt, user_message = build_prompt(recipes)
    response = context.chat_completer.complete(
        model=config.suggestion_model,
        max_tokens=config.suggestion_max_tokens,
        system=system_prompt,
        messages=[{'role': 'user', 'content': user_message}],
    )
    suggestion = extract_suggestion_text(response)
    logger.info(f"[DinnerSuggestion] Suggestion: {suggestion}")

    body = truncate_for_notification(suggestion)
    results = context.push_sender.send_multicast(config.notification_title, body, tokens)
    success_count = sum(1 for r in results if r.success)
    failure_count = len(results) - success_count
    logger.info(f"[DinnerSuggestion] Push: {success_count} sent, {failure_count} failed")

    stale_ids = find_stale_device_ids(devices, results)
    removed = 0
    if stale_ids:
        removed = context.device_registry.delete_devices(stale_ids)
        logger.info(f"[DinnerSuggestion] Removed {removed} stale token(s)")

    context.settings_store.mark_sent(today_str)
    logger.info(f"[DinnerSuggestion] Done. Dinner suggestion sent for {today_str}.")

    return JobOutcome(
        status='sent',
        date=today_str,
        suggestion=suggestion,
        success_count=success_count,
        failure_count=failure_count,
        removed_devices=removed,
    )
