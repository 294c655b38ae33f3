"""Core constants used across Irclog modules.

This module centralizes transcript grammar markers and defaults.
Keeping values here avoids magic literals in parsing logic.
"""

from __future__ import annotations

DEFAULT_COMMIT_INTERVAL_SECONDS = 1.0
DEFAULT_TRANSCRIPT_ENCODING = "utf-8"
DEFAULT_LOG_LEVEL = "WARNING"
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

YEAR_WIDTH = 4
DATE_PART_WIDTH = 2
TIMESTAMP_DELIMITER_WIDTH = 2

PRIVMSG_LEAD = "<"
PRIVMSG_NICK_DELIMITER = ">"
NOTICE_LEAD = "-"
NOTICE_NICK_DELIMITER = "-"
STAR_LEAD = "*"
ACTION_NICK_DELIMITER = " "

JOIN_MARKER = "> has joined "
PART_MARKER = "> has left "
KICK_MARKER = "was kicked by "
QUIT_MARKER = "> has quit IRC"
MODE_MARKER = " sets mode: "
NICK_MARKER = " is now known as "
TOPIC_MARKER = ' changes topic to "'

NETWORK_TABLE = "network"
BUFFER_TABLE = "buffer"
SENDER_TABLE = "sender"
LOG_TABLE = "log"
