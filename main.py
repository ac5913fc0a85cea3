#!/usr/bin/env python3
"""
Main entry point for HabitFlow.

    python main.py        # HTTP API
    python main.py bot    # Telegram bot
"""

import asyncio
import logging
import sys

from habitflow import bot, web


if __name__ == "__main__":
    mode = sys.argv[1] if len(sys.argv) > 1 else "web"
    if mode not in ("web", "bot"):
        print(f"Unknown mode: {mode}. Use 'web' or 'bot'.")
        sys.exit(2)
    try:
        if mode == "bot":
            asyncio.run(bot.main())
        else:
            web.main()
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("HabitFlow stopped")
    except Exception as e:
        logging.error(f"HabitFlow crashed with error: {e}")
        sys.exit(1)
