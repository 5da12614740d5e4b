"""
Unit tests for instruction delivery.
"""

import sys
from pathlib import Path
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from buildgen.instructions import Instruction
from buildgen.transport import InstructionSink, send_instructions


class RecordingSink:
    """Console stand-in that records commands and fails on request."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.sent = []

    def send(self, text):
        if text in self.failing:
            raise RuntimeError(f"rejected: {text}")
        self.sent.append(text)


class TestSendInstructions(unittest.IsolatedAsyncioTestCase):
    """Tests for send_instructions()."""

    async def asyncSetUp(self):
        self.sleeps = []

    async def fake_sleep(self, seconds):
        self.sleeps.append(seconds)

    def test_sink_protocol(self):
        assert isinstance(RecordingSink(), InstructionSink)

    async def test_sends_in_order(self):
        sink = RecordingSink()
        report = await send_instructions(
            [Instruction("setblock 0 0 0 a"), Instruction("setblock 1 0 0 b")], sink, self.fake_sleep
        )

        assert sink.sent == ["setblock 0 0 0 a", "setblock 1 0 0 b"]
        assert report.sent == 2
        assert report.failed_optional == []
        assert self.sleeps == []

    async def test_delays(self):
        instructions = [
            Instruction("forceload add 0 0 16 16", delay_ms=2000),
            Instruction("setblock 0 0 0 a"),
            Instruction("setblock 1 0 0 b", delay_ms=50),
        ]
        await send_instructions(instructions, RecordingSink(), self.fake_sleep)
        assert self.sleeps == [2.0, 0.05]

    async def test_optional_failure_is_skipped(self):
        instructions = [
            Instruction("setblock 0 0 0 vine", optional=True),
            Instruction("setblock 1 0 0 stone"),
        ]
        sink = RecordingSink(failing={"setblock 0 0 0 vine"})

        report = await send_instructions(instructions, sink, self.fake_sleep)

        assert sink.sent == ["setblock 1 0 0 stone"]
        assert report.sent == 1
        assert report.failed_optional == [instructions[0]]

    async def test_required_failure_stops_batch(self):
        instructions = [
            Instruction("setblock 0 0 0 stone"),
            Instruction("setblock 1 0 0 bad"),
            Instruction("setblock 2 0 0 stone"),
        ]
        sink = RecordingSink(failing={"setblock 1 0 0 bad"})

        with self.assertRaises(RuntimeError):
            await send_instructions(instructions, sink, self.fake_sleep)
        assert sink.sent == ["setblock 0 0 0 stone"]

    async def test_delay_applies_after_failed_optional(self):
        instructions = [Instruction("setblock 0 0 0 vine", delay_ms=10, optional=True)]
        sink = RecordingSink(failing={"setblock 0 0 0 vine"})

        await send_instructions(instructions, sink, self.fake_sleep)
        assert self.sleeps == [0.01]


if __name__ == "__main__":
    unittest.main(verbosity=2)
