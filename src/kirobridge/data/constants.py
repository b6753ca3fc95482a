# src/kirobridge/data/constants.py
from __future__ import annotations

KIRO_DIR_NAME = ".kiro"
SPECS_DIR_NAME = "specs"
HOOKS_DIR_NAME = "hooks"
SOURCE_DIR_NAME = "src"

LATEST_LINK_NAME = "latest"
TEMPLATE_DIR_NAME = "template"
EXCLUDED_SPEC_NAMES = (TEMPLATE_DIR_NAME, LATEST_LINK_NAME)

REQUIREMENTS_FILE_NAME = "000-requirements.md"
PROJECT_OVERVIEW_FILE_NAME = "001-project-overview.md"
USER_STORIES_FILE_NAME = "002-user-stories.md"
TECHNICAL_DESIGN_FILE_NAME = "003-technical-design.md"
API_SPECIFICATION_FILE_NAME = "004-api-specification.md"
DATABASE_SCHEMA_FILE_NAME = "005-database-schema.md"
IMPLEMENTATION_TASKS_FILE_NAME = "006-implementation-tasks.md"

# Order matters: validation reports documents in this sequence.
REQUIRED_SPEC_FILES: tuple[str, ...] = (
    PROJECT_OVERVIEW_FILE_NAME,
    USER_STORIES_FILE_NAME,
    TECHNICAL_DESIGN_FILE_NAME,
    API_SPECIFICATION_FILE_NAME,
    DATABASE_SCHEMA_FILE_NAME,
    IMPLEMENTATION_TASKS_FILE_NAME,
)

KIRO_CONFIG_FILE_NAME = "kiro.config.json"
IMPLEMENTATION_META_FILE_NAME = "implementation.meta.json"
SYNC_PROGRESS_FILE_NAME = "sync-progress.json"
VALIDATION_REPORT_FILE_NAME = "validation-report.json"
CONVENTIONS_OVERRIDE_FILE_NAME = "conventions.yaml"

TASKS_FILE_NAME = "TASKS.md"
GENERATED_EXTENSION = ".ts"
GENERATED_TYPES_FILE_NAME = f"generated.types{GENERATED_EXTENSION}"
TYPES_DIR_NAME = "types"
API_DIR_NAME = "api"
