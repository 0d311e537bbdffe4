"""Roster state engine for team shift calendars.

Modules:
- config: load and validate configuration (JSON or YAML)
- exceptions: error taxonomy shared by the engine and the AI client
- domain: entities, color-meaning registry, entity store, snapshot database
- engine: mutation API, rename propagation, suggestion merge
- services: date parsing, search and monthly report projections
- io: snapshot (de)serialization, legacy migrations, CSV import/export
- ai: suggestion request/response contracts, HTTP client, dialog session
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "exceptions",
    "domain",
    "engine",
    "services",
    "io",
    "ai",
    "cli",
]
