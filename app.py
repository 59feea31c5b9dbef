import logging
import socket
from typing import Optional
from urllib.parse import urlparse

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from telegram import Update
from telegram.error import TelegramError
from telegram.ext import Application, CommandHandler, ContextTypes

import chat_games
from chat_games.rendering import HELP_TEXT
from shared.logging_utils import configure_logging
from shared.settings import Settings

SETTINGS = Settings.from_env()
ALLOWED_UPDATES = ["message", "edited_message"]

configure_logging(level=SETTINGS.log_level, extra_values=[SETTINGS.telegram_token, SETTINGS.webhook_secret])
logger = logging.getLogger(__name__)

app = FastAPI()

APPLICATION: Optional[Application] = None
REGISTRY = chat_games.GameRegistry(replace_active=SETTINGS.replace_active_games)


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if update.message:
        await update.message.reply_text(HELP_TEXT, parse_mode="HTML")


def _webhook_url() -> str:
    return f"{SETTINGS.public_url.rstrip('/')}{SETTINGS.webhook_path}"


def _can_resolve_webhook_host(webhook_url: str) -> bool:
    host = urlparse(webhook_url).hostname
    if not host:
        logger.error("Webhook URL %s does not contain a hostname", webhook_url)
        return False
    try:
        socket.getaddrinfo(host, None)
    except socket.gaierror as exc:
        logger.warning("Skipping webhook registration for %s: cannot resolve %s (%s)", webhook_url, host, exc)
        return False
    return True


async def _set_webhook(webhook_url: str) -> None:
    await APPLICATION.bot.set_webhook(
        url=webhook_url,
        secret_token=SETTINGS.webhook_secret or None,
        allowed_updates=ALLOWED_UPDATES,
    )


@app.on_event("startup")
async def on_startup() -> None:
    global APPLICATION
    if not SETTINGS.telegram_token:
        logger.error("TELEGRAM_BOT_TOKEN is not set; the bot will not start")
        return
    APPLICATION = Application.builder().token(SETTINGS.telegram_token).build()
    APPLICATION.add_handler(CommandHandler(["start", "help"], start))
    chat_games.register_handlers(APPLICATION, REGISTRY, SETTINGS)
    await APPLICATION.initialize()
    await APPLICATION.start()
    if not SETTINGS.public_url:
        return
    webhook_url = _webhook_url()
    if not _can_resolve_webhook_host(webhook_url):
        logger.warning("Telegram webhook will not be configured without a resolvable host")
        return
    try:
        info = await APPLICATION.bot.get_webhook_info()
        webhook_is_different = info.url != webhook_url
    except TelegramError as exc:
        logger.warning("Failed to fetch current webhook info: %s", exc)
        webhook_is_different = True
    if webhook_is_different:
        try:
            await _set_webhook(webhook_url)
        except TelegramError as exc:
            logger.error("Failed to set webhook to %s: %s", webhook_url, exc)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    if APPLICATION is None:
        return
    await APPLICATION.stop()
    await APPLICATION.shutdown()


@app.post(SETTINGS.webhook_path)
async def telegram_webhook(request: Request) -> JSONResponse:
    if request.headers.get("X-Telegram-Bot-Api-Secret-Token", "") != SETTINGS.webhook_secret:
        raise HTTPException(status_code=403, detail="Invalid secret")
    if APPLICATION is None:
        raise HTTPException(status_code=503, detail="Bot is not running")
    update = Update.de_json(await request.json(), APPLICATION.bot)
    await APPLICATION.process_update(update)
    return JSONResponse({"ok": True})


@app.get("/set_webhook")
async def set_webhook() -> JSONResponse:
    if not SETTINGS.public_url:
        raise HTTPException(status_code=400, detail="PUBLIC_URL is not configured")
    if APPLICATION is None:
        raise HTTPException(status_code=503, detail="Bot is not running")
    webhook_url = _webhook_url()
    if not _can_resolve_webhook_host(webhook_url):
        raise HTTPException(status_code=503, detail="Webhook host cannot be resolved")
    try:
        await _set_webhook(webhook_url)
    except TelegramError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to set webhook: {exc}") from exc
    return JSONResponse({"url": webhook_url})


@app.get("/")
async def root() -> JSONResponse:
    return JSONResponse({"message": "Chat board games bot. See /healthz for status."})


@app.get("/healthz")
async def healthz_get():
    return {"status": "ok", "active_games": len(REGISTRY)}


@app.head("/healthz", include_in_schema=False)
async def healthz_head():
    return Response(status_code=200)
