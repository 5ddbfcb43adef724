"""Prompt templates for the career mentor."""

from __future__ import annotations

from typing import Iterable

from mentor_proxy.models import Task

CHAT_PROMPT = """
You are an AI Career Mentor for youth. You provide supportive, encouraging guidance on:
- Career path recommendations
- Skill development advice
- Learning resource suggestions
- Motivation and goal setting

User message: "{message}"

Respond in a friendly, supportive tone. Keep responses concise but helpful.
"""

ROADMAP_PROMPT = """
Create a detailed learning roadmap for "{skill}" at {level} level.

Return a JSON object with this structure:
{{
  "title": "skill name",
  "description": "brief description",
  "estimatedDuration": "time estimate",
  "levels": [
    {{
      "title": "level name",
      "description": "what you'll learn",
      "estimatedHours": number,
      "tasks": [
        {{
          "title": "task name",
          "description": "what to do",
          "estimatedHours": number,
          "resources": [
            {{
              "title": "resource name",
              "type": "video|article|course|book|project",
              "url": "example.com",
              "description": "why this resource",
              "duration": "time needed"
            }}
          ]
        }}
      ]
    }}
  ]
}}

Make it practical, actionable, and include real resources when possible.
"""

QUOTE_PROMPT = """
Generate a motivational quote for young people pursuing their careers and learning new skills.
Make it inspiring, relevant to career development, and encouraging.
Return just the quote text, nothing else.
"""

PROGRESS_PROMPT = """
Analyze this user's learning progress and provide encouraging insights:

Completed Tasks: {completed}
Pending Tasks: {pending}
In Progress: {in_progress}
Current Streak: {streak_days} days

Provide a brief, encouraging analysis with specific suggestions for improvement.
Keep it positive and actionable.
"""

NEXT_STEPS_PROMPT = """
Based on current roadmaps ({roadmaps}) and {completed_count} completed tasks,
suggest 3-5 next actionable steps for continued learning.

Return as a JSON array of strings.
"""


def chat_prompt(message: str) -> str:
    return CHAT_PROMPT.format(message=message)


def roadmap_prompt(skill: str, level: str) -> str:
    return ROADMAP_PROMPT.format(skill=skill, level=level)


def progress_prompt(tasks: Iterable[Task], streak_days: int) -> str:
    """Summarise task counts by status for the progress analysis."""

    counts = {"completed": 0, "pending": 0, "in-progress": 0}
    for task in tasks:
        counts[task.status] += 1
    return PROGRESS_PROMPT.format(
        completed=counts["completed"],
        pending=counts["pending"],
        in_progress=counts["in-progress"],
        streak_days=streak_days,
    )


def next_steps_prompt(roadmaps: Iterable[str], completed_count: int) -> str:
    return NEXT_STEPS_PROMPT.format(
        roadmaps=", ".join(roadmaps), completed_count=completed_count
    )
