# views.py
from pathlib import Path
from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(request, name: str, ctx, status_code: int = 200, **context):
    context["ctx"] = ctx
    return templates.TemplateResponse(request, name, context, status_code=status_code)
