"""
Jinja2 模板环境
"""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from session_todo.config import get_settings

settings = get_settings()

TEMPLATE_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
templates.env.globals["app_name"] = settings.APP_NAME
