"""
Tests for the ordered tree storage.

- test_ordered_tree.py: writes, removes, priorities and copy-on-write roots
- test_writes.py: parsing raw data into tagged writes
- test_ordering.py: the sibling comparator
- test_diff.py: child events computed between two tree states
"""
