#!/usr/bin/env python3
"""
Quick Start Guide for DOM Navigator.

Builds a small document, prints its outline, walks the cursor through it and
runs the same input through a profiling session.
"""

import io

from dom_navigator import NavigationSession, build_tree_string, navigate_string
from dom_navigator.shared import NavigatorConfig

SAMPLE_INPUT = """\
8
<n value = 'library'>
<n value = 'fiction'>
<n value = 'dune'>
</n>
</n>
<n value = 'poetry'>
</n>
</n>
3
first_child
first_child
parent
2
next_sibling
next_sibling
0
"""


def quick_start_example():
    """Quick start example showing basic usage."""

    print("QUICK START - DOM Navigator")
    print("=" * 30)

    # Step 1: Build the tree from the markup block
    print("\nStep 1: Building the tree")
    print("-" * 30)

    build_result = build_tree_string(SAMPLE_INPUT)
    print(f"Nodes: {build_result.node_count}, depth: {build_result.tree.max_depth}")
    print(build_result.tree.render())

    # Step 2: Execute the instruction batches
    print("\nStep 2: Navigating")
    print("-" * 30)
    print(navigate_string(SAMPLE_INPUT), end="")

    # Step 3: Profile a run
    print("\nStep 3: Profiling")
    print("-" * 30)

    config = NavigatorConfig().override(global___enable_profiling=True)
    session = NavigationSession(config, correlation_id="quick-start")
    result = session.run(io.StringIO(SAMPLE_INPUT), io.StringIO())

    print(f"Cases: {result.cases}, final cursor: {result.interpretation.final_value}")
    print(session.profiler.format_report())


if __name__ == "__main__":
    quick_start_example()
