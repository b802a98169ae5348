"""
Session negotiation — the one-time Hello/Identify handshake.
"""

import logging
import platform
from dataclasses import dataclass
from typing import Optional

from cordlink.transport.envelope import build_identify, build_resume, parse_hello

LOGGER = logging.getLogger(__name__)

# GUILDS | GUILD_MESSAGES | DIRECT_MESSAGES
DEFAULT_INTENTS = (1 << 0) | (1 << 9) | (1 << 12)

IDENTIFY_PROPERTIES = {
    "os": platform.system().lower() or "linux",
    "browser": "cordlink",
    "device": "cordlink",
}


@dataclass(frozen=True)
class ResumeState:
    session_id: str
    seq: int


async def negotiate(
    reader,
    writer,
    token: str,
    *,
    intents: int = DEFAULT_INTENTS,
    properties: Optional[dict[str, str]] = None,
    resume: Optional[ResumeState] = None,
) -> int:
    """Read Hello, answer with Identify (or Resume) and return the heartbeat interval in ms.

    Nothing is written unless the Hello is valid. Retrying is the caller's job.
    """
    interval = parse_hello(await reader.next_frame())
    LOGGER.info("Received Hello, heartbeat interval %d ms", interval)

    if resume is not None:
        LOGGER.info("Resuming session %s at seq %d", resume.session_id, resume.seq)
        await writer.send_frame(build_resume(token, resume.session_id, resume.seq))
    else:
        await writer.send_frame(build_identify(token, intents, properties or IDENTIFY_PROPERTIES))
    return interval
