import unittest

from ptrchain.analyzer.chain_resolver import ChainResolver, follow_chain, reaches_destination
from ptrchain.memory.memory_pointer import MemoryPointer


class TestFollowChain(unittest.TestCase):
    def setUp(self):
        self.snapshot = {0x1000: 0x2000, 0x2010: 0x3000}

    def test_single_offset_resolves(self):
        pointer = MemoryPointer.absolute(0x1000, [0x10])
        self.assertEqual(follow_chain(pointer, self.snapshot, 0, True, False), 0x2010)

    def test_raw_value_short_circuits(self):
        pointer = MemoryPointer.absolute(0x1000, [0x10])
        self.assertEqual(follow_chain(pointer, self.snapshot, 0, True, True), 0x2000)

    def test_missing_base(self):
        for offsets in ([], [0x10], [0x10, 0x20]):
            pointer = MemoryPointer.absolute(0x9999, offsets)
            self.assertIsNone(follow_chain(pointer, self.snapshot))

    def test_two_levels(self):
        pointer = MemoryPointer.absolute(0x1000, [0x10, -0x8])
        self.assertEqual(follow_chain(pointer, self.snapshot), 0x2FF8)

    def test_raw_value_on_second_level(self):
        pointer = MemoryPointer.absolute(0x1000, [0x10, -0x8])
        self.assertEqual(follow_chain(pointer, self.snapshot, return_raw_value=True), 0x3000)

    def test_broken_chain(self):
        pointer = MemoryPointer.absolute(0x1000, [0x20, 0x8])
        self.assertIsNone(follow_chain(pointer, self.snapshot))

    def test_empty_offsets_returns_normalized_base(self):
        pointer = MemoryPointer.absolute(0x81001000)
        self.assertEqual(follow_chain(pointer, self.snapshot, starting_offset=0x81000000), 0x1000)

    def test_starting_offset(self):
        snapshot = {0x1000: 0x80002000, 0x2010: 0x80003000}
        pointer = MemoryPointer.absolute(0x80001000, [0x10, 0x4])
        self.assertEqual(follow_chain(pointer, snapshot, starting_offset=0x80000000), 0x80003004)
        self.assertIsNone(follow_chain(pointer, snapshot, starting_offset=0))

    def test_module_base_uses_resolved_address(self):
        pointer = MemoryPointer.from_module("Module.so+0x40", 0x1000, [0x10])
        self.assertEqual(follow_chain(pointer, self.snapshot), 0x2010)

    def test_negative_offset_wraps_to_64_bits(self):
        snapshot = {0x1000: 0x0}
        pointer = MemoryPointer.absolute(0x1000, [-1])
        self.assertEqual(follow_chain(pointer, snapshot), 0xFFFFFFFFFFFFFFFF)


class TestCycles(unittest.TestCase):
    def setUp(self):
        # 0x1000 points at itself
        self.snapshot = {0x1000: 0x1000}
        self.pointer = MemoryPointer.absolute(0x1000, [0x0, 0x0, 0x0])

    def test_cycle_excluded(self):
        self.assertIsNone(follow_chain(self.pointer, self.snapshot, exclude_cycles=True))

    def test_cycle_allowed_terminates(self):
        self.assertEqual(follow_chain(self.pointer, self.snapshot, exclude_cycles=False), 0x1000)

    def test_cycle_on_last_step_excluded(self):
        snapshot = {0x1000: 0x2000, 0x2000: 0x1000}
        pointer = MemoryPointer.absolute(0x1000, [0x0, 0x0])
        self.assertIsNone(follow_chain(pointer, snapshot, exclude_cycles=True))
        self.assertEqual(follow_chain(pointer, snapshot, exclude_cycles=False), 0x1000)

    def test_cycle_state_uses_normalized_addresses(self):
        snapshot = {0x0: 0x10000000}
        pointer = MemoryPointer.absolute(0x10000000, [0x0])
        self.assertIsNone(follow_chain(pointer, snapshot, starting_offset=0x10000000))
        self.assertEqual(
            follow_chain(pointer, snapshot, starting_offset=0x10000000, exclude_cycles=False),
            0x10000000,
        )

    def test_visited_set_is_per_call(self):
        snapshot = {0x1000: 0x2000, 0x2010: 0x3000}
        pointer = MemoryPointer.absolute(0x1000, [0x10])
        self.assertEqual(follow_chain(pointer, snapshot), 0x2010)
        self.assertEqual(follow_chain(pointer, snapshot), 0x2010)


class TestReachesDestination(unittest.TestCase):
    def setUp(self):
        self.snapshot = {0x1000: 0x2000, 0x2010: 0x3000}

    def test_matches_follow_chain(self):
        pointers = [
            MemoryPointer.absolute(0x1000, [0x10]),
            MemoryPointer.absolute(0x1000, [0x10, 0x4]),
            MemoryPointer.absolute(0x1000, [0x20, 0x4]),
            MemoryPointer.absolute(0x9999, [0x10]),
        ]
        for pointer in pointers:
            destination = follow_chain(pointer, self.snapshot, 0, True, False)
            for target in (0x2010, 0x3004, 0x0):
                self.assertEqual(
                    reaches_destination(pointer, self.snapshot, target, 0, True),
                    destination == target,
                )

    def test_ignores_raw_value_mode(self):
        pointer = MemoryPointer.absolute(0x1000, [0x10])
        self.assertFalse(reaches_destination(pointer, self.snapshot, 0x2000))
        self.assertTrue(reaches_destination(pointer, self.snapshot, 0x2010))


class TestChainResolver(unittest.TestCase):
    def setUp(self):
        self.snapshot = {0x1000: 0x2000, 0x2010: 0x3000, 0x4000: 0x2000}
        self.resolver = ChainResolver(self.snapshot)

    def test_follow(self):
        pointer = MemoryPointer.absolute(0x1000, [0x10])
        self.assertEqual(self.resolver.follow(pointer), 0x2010)
        self.assertEqual(self.resolver.follow(pointer, return_raw_value=True), 0x2000)

    def test_resolve_all_keeps_failures(self):
        pointers = [
            MemoryPointer.absolute(0x9999, [0x10]),
            MemoryPointer.absolute(0x1000, [0x10, 0x4]),
        ]
        self.assertEqual(
            self.resolver.resolve_all(pointers),
            [(pointers[0], None), (pointers[1], 0x3004)],
        )

    def test_find_reaching_skips_unresolved(self):
        pointers = [
            MemoryPointer.absolute(0x4000, [0x10]),
            MemoryPointer.absolute(0x9999, [0x10]),
            MemoryPointer.absolute(0x1000, [0x20, 0x0]),
            MemoryPointer.absolute(0x1000, [0x10]),
        ]
        self.assertEqual(
            self.resolver.find_reaching(iter(pointers), 0x2010),
            [pointers[0], pointers[3]],
        )

    def test_settings_are_applied(self):
        resolver = ChainResolver({0x1000: 0x1000}, starting_offset=0, exclude_cycles=False)
        self.assertTrue(resolver.reaches(MemoryPointer.absolute(0x1000, [0x0, 0x0]), 0x1000))


if __name__ == "__main__":
    unittest.main()
