"""Centralized constants for makr."""

# Recent projects kept in the state document (newest first)
MAX_RECENT_PROJECTS = 50

# Languages offered by `makr new` until the user adds their own
DEFAULT_LANGUAGES = ["typescript", "javascript", "python", "rust", "go", "java", "ruby", "other"]

# (name, directory under $HOME, description)
DEFAULT_PROJECT_TYPES = [
    ("official", "projects", "Production-ready projects"),
    ("experiment", "experiments", "Quick tests and experiments"),
    ("learning", "learning", "Tutorials and courses"),
    ("playground", "playground", "Sandbox and scratch work"),
]

DEFAULT_BRANCH = "main"
DEFAULT_CLONE_DIR = "projects"


class ForkPolling:
    """Readiness poll after a fork request."""

    MAX_ATTEMPTS = 10
    DELAY_SECONDS = 2.0


# Written into empty projects created by `makr new`
STARTER_GITIGNORE = """# Dependencies
node_modules/
__pycache__/
venv/
.venv/
target/

# Build outputs
dist/
build/
*.egg-info/

# IDE
.idea/
.vscode/
*.swp
*.swo

# Environment
.env
.env.local
*.local

# OS
.DS_Store
Thumbs.db

# Logs
*.log
logs/
"""
