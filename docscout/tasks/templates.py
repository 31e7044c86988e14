"""Jinja2 templates for the documents of a task bundle."""

from __future__ import annotations

from jinja2 import BaseLoader, Environment, Template

INTENT_FILENAME = "INTENT.md"
PLAN_FILENAME = "plan.md"
STATUS_FILENAME = "TASK.yaml"

PLAN_PHASES: tuple[str, ...] = ("analyze", "generate", "illustrate", "validate", "localize", "publish")

LOCALE_NAMES: dict[str, str] = {
    "en": "English",
    "zh": "Chinese",
    "ja": "Japanese",
    "ko": "Korean",
    "fr": "French",
    "de": "German",
    "es": "Spanish",
}


_INTENT_TEMPLATE = """# Documentation Generation: {{ candidate.name }}

## Overview

Generate comprehensive documentation for **{{ candidate.name }}** ({{ candidate.full_name }}).

- **Stars:** {{ stars }}
- **Language:** {{ candidate.language or "Unknown" }}
- **Description:** {{ description }}
- **URL:** {{ candidate.html_url }}

## Source Analysis

- **File count:** {{ candidate.file_count }}
- **Has docs folder:** {{ "Yes" if candidate.has_docs_folder else "No" }}
- **README length:** {{ candidate.readme_length }} chars

## README Excerpt

```
{{ readme_excerpt }}
```

## Documentation Plan

Generate documentation in {{ locales | join(", ") }}.

### Adaptive Doc Count

- Simple repo (< 200 files, single language): 3 docs
- Complex repo (> 200 files, multiple languages, framework/library): 5-6 docs

### Required Documents (minimum)

1. **Overview** - What the project does, why it matters
2. **Getting Started** - Installation and basic usage
3. **Architecture** - System design and key concepts

### For Complex Repos (additional)

4. **API Reference** - Key APIs and interfaces
5. **Advanced Usage** - Configuration, customization, plugins
6. **Contributing** - Development setup, guidelines

## Images & Diagrams

- Mermaid code blocks for: architecture, data flow, component diagrams
- AI hero images for overview and getting started pages

## Languages

{% for locale in locales %}
- {{ locale }}
{% endfor %}
"""


_PLAN_TEMPLATE = """# Execution Plan: {{ candidate.name }} Documentation

## Overview

Generate and publish documentation for {{ candidate.name }} to {{ publish_target_url }}.

## Phase 0: Clone & Analyze

### Description
Shallow clone the repository, analyze structure, README, and key source files.
Determine appropriate doc count (3 for simple, 5-6 for complex).

### Acceptance Criteria
- [ ] Repository cloned successfully
- [ ] Structure analysis complete
- [ ] Doc count determined

## Phase 1: Generate Docs

### Description
Initialize the documentation workspace and generate the planned documents.

### Acceptance Criteria
- [ ] Generation completed
- [ ] All documents meet minimum word counts

## Phase 2: Images & Diagrams

### Description
Insert mermaid diagrams and generate AI hero images.

### Acceptance Criteria
- [ ] Mermaid diagrams in architecture docs
- [ ] AI hero images generated

## Phase 3: Validate

### Description
Validate document structure, metadata and content.

### Acceptance Criteria
- [ ] Structure check passes
- [ ] All metadata files correct
- [ ] All internal links resolve

## Phase 4: Localize

### Description
Translate the documents into every secondary locale.

### Acceptance Criteria
{% for locale in secondary_locales %}
- [ ] {{ locale }} translations complete
{% else %}
- [ ] No secondary locales configured
{% endfor %}

## Phase 5: Publish

### Description
Publish to {{ publish_target_url }} and verify.

### Acceptance Criteria
- [ ] Published successfully
- [ ] URL accessible
- [ ] Recorded in history
"""


_STATUS_TEMPLATE = """status: ready
owner: null
assignee: null
phase: 0/{{ phase_count }}
updated: {{ updated }}
heartbeat: null
"""


def _environment() -> Environment:
    return Environment(loader=BaseLoader(), autoescape=False, trim_blocks=True, lstrip_blocks=True)


class BundleTemplates:
    """Compiled templates for INTENT.md, plan.md and TASK.yaml."""

    def __init__(
        self,
        intent: str | None = None,
        plan: str | None = None,
        status: str | None = None,
    ) -> None:
        env = _environment()
        self.intent: Template = env.from_string(intent or _INTENT_TEMPLATE)
        self.plan: Template = env.from_string(plan or _PLAN_TEMPLATE)
        self.status: Template = env.from_string(status or _STATUS_TEMPLATE)


def locale_label(code: str) -> str:
    label = LOCALE_NAMES.get(code.lower())
    return f"{label} ({code})" if label else code


__all__ = [
    "BundleTemplates",
    "INTENT_FILENAME",
    "LOCALE_NAMES",
    "PLAN_FILENAME",
    "PLAN_PHASES",
    "STATUS_FILENAME",
    "locale_label",
]
