"""Telegram handlers that drive the board games."""

from __future__ import annotations

import html
import logging
from typing import Dict, Optional, Tuple

from telegram import Message, MessageEntity, Update, User
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.ext import CallbackContext, ContextTypes

from shared.settings import Settings

from ..rendering import HELP_TEXT, BoardRenderer
from ..state import GameError, GameRegistry, MoveStatus, NoActiveGameError
from ..state.models import PlayerId
from .commands import MoveCommand, StartCommand, parse_game_command, parse_move_number

logger = logging.getLogger(__name__)

REGISTRY_KEY = "game_registry"
SETTINGS_KEY = "game_settings"
DIRECTORY_KEY = "game_players"

RoomKey = Tuple[int, int]
RENDERER = BoardRenderer()


class PlayerDirectory:
    """Display names and usernames of the users the bot has seen."""

    def __init__(self) -> None:
        self._names: Dict[int, str] = {}
        self._usernames: Dict[str, int] = {}

    def remember(self, user: Optional[User]) -> None:
        if user is None or getattr(user, "is_bot", False):
            return
        username = getattr(user, "username", None)
        if username:
            self._usernames[username.lower()] = user.id
            self._names[user.id] = f"@{username}"
        else:
            name = (getattr(user, "full_name", None) or getattr(user, "first_name", None) or "").strip()
            self._names[user.id] = name or str(user.id)

    def lookup(self, username: str) -> Optional[int]:
        return self._usernames.get(username.lstrip("@").lower())

    def name_for(self, player: PlayerId) -> str:
        return self._names.get(player, str(player))  # type: ignore[arg-type]


def _registry(context: CallbackContext) -> GameRegistry:
    registry = context.bot_data.get(REGISTRY_KEY)
    if registry is None:
        registry = context.bot_data[REGISTRY_KEY] = GameRegistry()
    return registry


def _settings(context: CallbackContext) -> Settings:
    settings = context.bot_data.get(SETTINGS_KEY)
    if settings is None:
        settings = context.bot_data[SETTINGS_KEY] = Settings()
    return settings


def _directory(context: CallbackContext) -> PlayerDirectory:
    directory = context.bot_data.get(DIRECTORY_KEY)
    if directory is None:
        directory = context.bot_data[DIRECTORY_KEY] = PlayerDirectory()
    return directory


def room_for(message: Message) -> RoomKey:
    return (message.chat_id, getattr(message, "message_thread_id", None) or 0)


def resolve_opponent(message: Message, token: Optional[str], directory: PlayerDirectory) -> Optional[int]:
    """Find the challenged user from a reply, a text mention or an @username."""

    replied = getattr(message, "reply_to_message", None)
    replied_user = getattr(replied, "from_user", None) if replied else None
    if replied_user is not None and not getattr(replied_user, "is_bot", False):
        directory.remember(replied_user)
        return replied_user.id
    for entity in getattr(message, "entities", None) or ():
        if entity.type == MessageEntity.TEXT_MENTION and entity.user is not None:
            directory.remember(entity.user)
            return entity.user.id
    if token and token.startswith("@"):
        return directory.lookup(token)
    return None


async def _reply(message: Message, text: str) -> None:
    try:
        await message.reply_text(text, parse_mode=ParseMode.HTML)
    except TelegramError:
        logger.exception("Failed to reply in chat %s", message.chat_id)


async def track_user(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Remember every sender so @mentions can be resolved later."""

    message = update.effective_message
    directory = _directory(context)
    directory.remember(update.effective_user)
    replied = getattr(message, "reply_to_message", None) if message else None
    if replied is not None:
        directory.remember(getattr(replied, "from_user", None))


async def game_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Entry point for ``/game`` and ``!game`` messages."""

    message = update.effective_message
    user = update.effective_user
    if not message or not user:
        return
    command = parse_game_command(message.text)
    if command is None:
        return
    directory = _directory(context)
    directory.remember(user)
    try:
        if isinstance(command, StartCommand):
            await _start_game(message, user, command, context)
        elif isinstance(command, MoveCommand):
            await _play_move(message, user, command, context)
        else:
            await _reply(message, HELP_TEXT)
    except GameError as exc:
        logger.debug("Rejected game command from %s: %s", user.id, exc.message)
        await _reply(message, html.escape(exc.message))


async def _start_game(
    message: Message, user: User, command: StartCommand, context: ContextTypes.DEFAULT_TYPE
) -> None:
    directory = _directory(context)
    opponent = resolve_opponent(message, command.opponent, directory)
    if opponent is None:
        if command.opponent:
            text = (
                f"❌ I don't know {html.escape(command.opponent)} yet. Ask them to send a message here, "
                "or reply to one of their messages with the command."
            )
        else:
            text = f"❌ Please mention a player to play with: /game {command.kind.value} @player"
        await _reply(message, text)
        return
    session = _registry(context).start_game(room_for(message), command.kind, user.id, opponent)
    await _reply(message, RENDERER.render_state(session, names=directory.name_for))


async def _play_move(
    message: Message, user: User, command: MoveCommand, context: ContextTypes.DEFAULT_TYPE
) -> None:
    registry = _registry(context)
    room = room_for(message)
    session = registry.get_active_game(room)
    if session is None:
        raise NoActiveGameError()
    move = parse_move_number(command.token)
    outcome = registry.apply_move(room, user.id, move)
    text = RENDERER.render_state(session, outcome, names=_directory(context).name_for)
    await _reply(message, text)
    if outcome.status is not MoveStatus.CONTINUE:
        logger.info("Game in chat %s ended with %s", message.chat_id, outcome.status.value)


async def sweep_idle_games_job(context: CallbackContext) -> None:
    """Evict idle games and let each affected chat know."""

    settings = _settings(context)
    expired = _registry(context).sweep_idle_sessions(None, settings.idle_timeout_delta)
    if not expired or not context.bot:
        return
    directory = _directory(context)
    for session in expired:
        chat_id, thread_id = session.room_id
        try:
            await context.bot.send_message(
                chat_id,
                RENDERER.render_expired(session, directory.name_for),
                parse_mode=ParseMode.HTML,
                message_thread_id=thread_id or None,
            )
        except TelegramError:
            logger.warning("Failed to announce expired game in chat %s", chat_id)


__all__ = [
    "DIRECTORY_KEY",
    "PlayerDirectory",
    "REGISTRY_KEY",
    "SETTINGS_KEY",
    "game_command",
    "resolve_opponent",
    "room_for",
    "sweep_idle_games_job",
    "track_user",
]
