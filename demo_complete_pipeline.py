#!/usr/bin/env python3
"""
Complete Pipeline Demo: CSV → Graph → Filters → Layout → SVG

Shows the full workflow:
1. Build configuration (defaults + synonym groups)
2. Parse the example survey CSV into a relation graph
3. Compare merged and raw views
4. Filter by person and lay out
5. Export SVG
"""

import sys

from relgraph.config import DEFAULT_CONFIG, load_configuration_file, merge_configuration
from relgraph.examples import EXAMPLE_CONFIG, build_example_survey_csv
from relgraph.session import ViewSession


def main():
    if len(sys.argv) > 1:
        config = load_configuration_file(sys.argv[1])
    else:
        config = merge_configuration(DEFAULT_CONFIG, EXAMPLE_CONFIG)

    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: CSV → Graph → Filters → SVG")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Parse CSV
    # =========================================================================
    print("\n1. PARSING CSV...")
    session = ViewSession(config=config)
    if not session.load_csv(build_example_survey_csv()):
        print(f"   ✗ {session.error}")
        return 1
    graph = session.graph
    print(f"   ✓ Persons: {len(graph.nodes)}")
    print(f"   ✓ Merged edges: {len(graph.edges_merged)}")
    print(f"   ✓ Raw edges: {len(graph.edges_raw)}")

    # =========================================================================
    # STEP 2: Merged vs raw
    # =========================================================================
    print("\n2. MERGED VS RAW LABELS:")
    print("-" * 80)
    for merged, raw in zip(graph.edges_merged, graph.edges_raw):
        print(f"   {merged.source:>8} → {merged.target:<8} {merged.label:<22} (raw: {raw.label})")

    # =========================================================================
    # STEP 3: Filter
    # =========================================================================
    print("\n3. FILTERING ON ALICE...")
    visible = session.set_person_filter({"Alice"})
    for node in visible.nodes:
        print(f"   {node.label:<8} at ({node.x:8.2f}, {node.y:8.2f})")
    print(f"   ✓ {len(visible.edges)} visible edges")

    # =========================================================================
    # STEP 4: Export
    # =========================================================================
    print("\n4. EXPORTING SVG...")
    path = session.export_svg(".")
    if path is None:
        print(f"   ✗ {session.error}")
        return 1
    print(f"   ✓ Saved {path}")

    print("\n" + "=" * 80)
    print("PIPELINE COMPLETE!")
    print("=" * 80)
    return 0


if __name__ == "__main__":
    sys.exit(main())
