#!/usr/bin/env python3
"""
Quick Start Guide for the VNode template compiler.

This example walks through compiling a template, rendering it with the
default node factory and with a custom one, and inspecting the static map
a caching layer would use.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from vnode_compiler import CompilerConfig, CompilerOptions, compile_template, default_directives
from vnode_compiler.tree import format_path

TEMPLATE = """
<section class="inbox">
    <!-- header never changes -->
    <h1>Inbox</h1>
    <ul>
        <li for="message in messages" :class="message.state">{{ message.subject }}</li>
    </ul>
    <p if="not messages">Nothing new, {{ user.name }}.</p>
</section>
"""


class User:
    def __init__(self, name):
        self.name = name


class Message:
    def __init__(self, subject, state="unread"):
        self.subject = subject
        self.state = state


def quick_start_example():
    """Compile once, render twice."""

    print("QUICK START - VNode Template Compiler")
    print("=" * 45)

    # Step 1: Compile the template
    print("\nStep 1: Compiling")
    print("-" * 30)

    options = CompilerOptions(directives=default_directives())
    template = compile_template(TEMPLATE, options, correlation_id="quick-start")

    print(f"Generated {template.metrics.code_length} characters of render code")
    print(f"Nodes: {template.metrics.node_count}, "
          f"static: {template.metrics.static_node_count} "
          f"({template.metrics.static_ratio:.0%})")
    for entry in template.diagnostics:
        print(f"  - {entry.severity.name}: {entry.message}")

    # Step 2: Render with the default node factory
    print("\nStep 2: Rendering VNodes")
    print("-" * 30)

    tree = template.render(
        messages=[Message("Welcome"), Message("Weekly report", "read")],
        user=User("Ada"),
    )
    items = tree.children[1].children
    for item in items:
        print(f"  <li class={item.props['class']!r}> {item.children[0].children}")

    # Step 3: Render with a custom node factory
    print("\nStep 3: Rendering dictionaries")
    print("-" * 30)

    def dict_h(type, props=None, children=None):
        return {"type": type, "props": props, "children": children}

    empty = template.render(h=dict_h, messages=[], user=User("Ada"))
    print(f"  {empty['children'][-1]['children'][0]['children']}")

    # Step 4: Static map
    print("\nStep 4: Static map")
    print("-" * 30)

    for path in template.static_map.static_paths():
        print(f"  {format_path(path)} is static")

    # Step 5: Configuration presets
    print("\nStep 5: Lenient configuration")
    print("-" * 30)

    lenient = CompilerOptions(config=CompilerConfig.lenient())
    greeting = compile_template("<p>Hello {{ nobody }}</p>", lenient).render()
    print(f"  {greeting.children[0].children}")


if __name__ == "__main__":
    quick_start_example()
