"""
Instruction delivery contract.

The console connection itself lives outside this package. Anything with a
``send(text)`` method that raises on failure can execute a build; this
module defines the pacing and failure rules every transport must follow.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, List, Protocol, runtime_checkable

from .instructions import Instruction

logger = logging.getLogger(__name__)


@runtime_checkable
class InstructionSink(Protocol):
    """A console that executes one command line at a time."""

    def send(self, text: str) -> None:
        """Execute ``text``; raise on failure."""
        ...


@dataclass
class SendReport:
    """
    Outcome of a delivered batch.

    Attributes:
        sent: Number of instructions executed successfully
        failed_optional: Optional instructions that failed and were skipped
    """
    sent: int = 0
    failed_optional: List[Instruction] = field(default_factory=list)


async def send_instructions(
    instructions: Iterable[Instruction],
    sink: InstructionSink,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
) -> SendReport:
    """
    Send instructions strictly in order.

    After an instruction with ``delay_ms`` the next one waits that long.
    A failing optional instruction is logged and skipped; any other failure
    stops the batch and propagates. Nothing is retried.

    Args:
        instructions: Instructions in execution order
        sink: Console to send to
        sleep: Awaitable sleep, replaceable in tests

    Returns:
        SendReport
    """
    report = SendReport()

    for instruction in instructions:
        try:
            sink.send(instruction.text)
        except Exception as e:
            if not instruction.optional:
                raise
            logger.warning("Optional instruction failed (%s): %s", e, instruction.text)
            report.failed_optional.append(instruction)
        else:
            report.sent += 1

        if instruction.delay_ms:
            await sleep(instruction.delay_ms / 1000)

    logger.info("Sent %d instructions, %d optional failures", report.sent, len(report.failed_optional))
    return report
