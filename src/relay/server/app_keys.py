# src/relay/server/app_keys.py
from aiohttp import web

from relay.managers.element_history_manager import ElementHistoryManager
from relay.server.broadcaster import Broadcaster

HISTORY_MANAGER = web.AppKey("history_manager", ElementHistoryManager)
BROADCASTER = web.AppKey("broadcaster", Broadcaster)
HISTORY_LIMIT = web.AppKey("history_limit", int)
