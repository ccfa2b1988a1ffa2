# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalogue of gentle tools offered in the Moment Mode overlay."""

from dataclasses import dataclass
from enum import Enum


class ToolCategory(str, Enum):
    """Quick wins run in place; downloads are printable templates."""

    QUICK_WIN = "quick-win"
    DOWNLOAD = "download"


@dataclass(frozen=True)
class GentleTool:
    title: str
    description: str
    category: ToolCategory


GENTLE_TOOLS = (
    GentleTool(
        "Two-Minute Reset",
        "A quick breathing exercise to center yourself",
        ToolCategory.QUICK_WIN,
    ),
    GentleTool(
        "Desk Stretch Routine",
        "Simple stretches you can do without leaving your space",
        ToolCategory.QUICK_WIN,
    ),
    GentleTool(
        "Grounding Exercise",
        "Notice 5 things you can see, 4 you can touch...",
        ToolCategory.QUICK_WIN,
    ),
    GentleTool(
        "Positive Note Template",
        "Write a quick note to yourself for later",
        ToolCategory.DOWNLOAD,
    ),
    GentleTool(
        "End of Day Reflection",
        "Three questions to close out a tough day",
        ToolCategory.DOWNLOAD,
    ),
    GentleTool(
        "Tomorrow is New",
        "A simple planning template for fresh starts",
        ToolCategory.DOWNLOAD,
    ),
)


def tools_by_category(category: ToolCategory) -> list[GentleTool]:
    """Return the tools of one category, in catalogue order."""
    return [tool for tool in GENTLE_TOOLS if tool.category is category]
