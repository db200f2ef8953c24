"""
Shared shell and helpers for the HTML pages

Author: TM3
Date: 2026-03-02
"""
import html
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urlencode

from fastapi import HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from storefront.core.auth import SessionUser, session_token, user_from_token
from storefront.core.errors import ForbiddenError, NotAuthorizedError
from storefront.services.task_rules import format_currency

STATUS_LABELS = {1: "Pending", 2: "Approved", 3: "Rejected"}


def esc(value) -> str:
    return html.escape("" if value is None else str(value))


def money(amount) -> str:
    return esc(format_currency(amount))


def fmt_date(value) -> str:
    if value is None:
        return ""
    return esc(value.strftime("%Y-%m-%d %H:%M"))


# --- session ----------------------------------------------------------

def page_user(request: Request) -> Optional[SessionUser]:
    """Logged-in user of an HTML request, or None"""
    user = getattr(request.state, "user", None)
    if user is not None:
        return user

    token = session_token(request)
    if not token:
        return None
    try:
        return user_from_token(token)
    except HTTPException:
        return None


def require_page_user(request: Request) -> SessionUser:
    user = page_user(request)
    if user is None:
        raise NotAuthorizedError("Please sign in to continue")
    return user


def require_page_label(request: Request, *labels: str) -> SessionUser:
    user = require_page_user(request)
    if not any(user.has_label(label) for label in labels):
        raise ForbiddenError("You do not have access to this page")
    return user


# --- responses --------------------------------------------------------

def redirect(url: str, message: Optional[str] = None, error: Optional[str] = None) -> RedirectResponse:
    """303 back to a page, with an optional flash message"""
    params = {}
    if message:
        params["message"] = message
    if error:
        params["error"] = error
    if params:
        url = f"{url}{'&' if '?' in url else '?'}{urlencode(params)}"
    return RedirectResponse(url=url, status_code=303)


def render(request: Request, body_html: str, title: str, status_code: int = 200) -> HTMLResponse:
    flash = request.query_params.get("message")
    error = request.query_params.get("error")
    return HTMLResponse(
        page_shell(body_html, title=title, user=page_user(request), flash=flash, error=error),
        status_code=status_code
    )


# --- fragments --------------------------------------------------------

def data_table(headers: Sequence[str], rows: Iterable[Sequence[str]], empty: str = "Nothing here yet.") -> str:
    """Rows hold already-escaped HTML cells"""
    body_rows = ["<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>" for row in rows]
    if not body_rows:
        return f'<p class="muted">{esc(empty)}</p>'
    head = "".join(f"<th>{esc(h)}</th>" for h in headers)
    return f"""
    <div class="table-wrap">
      <table>
        <thead><tr>{head}</tr></thead>
        <tbody>{''.join(body_rows)}</tbody>
      </table>
    </div>
    """


def post_button(action: str, label: str, confirm: Optional[str] = None, hidden: Optional[dict] = None) -> str:
    onsubmit = f' onsubmit="return confirm(\'{esc(confirm)}\')"' if confirm else ""
    fields = "".join(
        f'<input type="hidden" name="{esc(name)}" value="{esc(value)}">'
        for name, value in (hidden or {}).items()
    )
    return (
        f'<form method="POST" action="{esc(action)}" class="inline"{onsubmit}>'
        f'{fields}<button class="button-small" type="submit">{esc(label)}</button></form>'
    )


def status_pill(status: int) -> str:
    label = STATUS_LABELS.get(int(status), "Unknown")
    return f'<span class="pill pill-{label.lower()}">{label}</span>'


def card(heading: str, inner_html: str, subtext: Optional[str] = None) -> str:
    sub = f'<p class="subtext">{esc(subtext)}</p>' if subtext else ""
    return f"""
    <section class="card">
      <h2 class="section-heading">{esc(heading)}</h2>
      {sub}
      {inner_html}
    </section>
    """


def pagination(base_url: str, page: int, page_size: int, total: int, **params) -> str:
    pages = max((total + page_size - 1) // page_size, 1)
    links: List[str] = []
    for target, label in ((page - 1, "‹ Prev"), (page + 1, "Next ›")):
        if 0 <= target < pages:
            query = urlencode({**params, "page": target})
            links.append(f'<a class="page-link" href="{esc(base_url)}?{esc(query)}">{label}</a>')
    return f'<div class="pagination-bar"><span class="muted">Page {page + 1} of {pages}</span>{"".join(links)}</div>'


# --- shell ------------------------------------------------------------

def _nav_links_html(user: Optional[SessionUser]) -> str:
    if user is None:
        return """
        <a href="/">Home</a>
        <a href="/contact">Contact</a>
        <a href="/signup">Sign up</a>
        <a href="/login">Sign in</a>
        """

    links = [
        ("/", "Home"),
        ("/task", "Tasks"),
        ("/orders", "Orders"),
        ("/my", "My"),
        ("/contact", "Contact"),
    ]
    if user.is_seller:
        links.append(("/seller", "Seller"))
    if user.is_admin or user.is_superadmin:
        links.append(("/admin", "Admin"))
    if user.is_superadmin:
        links.append(("/superadmin", "Superadmin"))
    links.append(("/logout", "Logout"))
    return "\n".join(f'<a href="{href}">{label}</a>' for href, label in links)


def page_shell(
    body_html: str,
    title: str,
    user: Optional[SessionUser],
    flash: Optional[str] = None,
    error: Optional[str] = None
) -> str:
    """
    Shared shell for all pages.
    user:
      - None if anonymous
      - the session user otherwise; decides which dashboards are linked
    """
    nav_links = _nav_links_html(user)
    greeting = f'<span class="brand-tagline">Signed in as {esc(user.name or user.phone or "")}</span>' if user else ""
    notices = ""
    if flash:
        notices += f'<div class="flash flash-ok">{esc(flash)}</div>'
    if error:
        notices += f'<div class="flash flash-error">{esc(error)}</div>'

    return f"""
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8"/>
<meta name="viewport" content="width=device-width,initial-scale=1"/>
<title>{esc(title)}</title>
<style>
    :root {{
        --bg-page: #f9fafb;
        --bg-card: #ffffff;
        --border-card: #e5e7eb;
        --text-main: #111827;
        --text-dim: #6b7280;
        --accent-bg: #16a34a;
        --accent-bg-hover: #15803d;
        --radius-card: 14px;
    }}
    * {{ box-sizing: border-box; }}
    body {{
        margin: 0;
        background: var(--bg-page);
        color: var(--text-main);
        font-family: -apple-system,BlinkMacSystemFont,"Segoe UI",Roboto,Helvetica,Arial,sans-serif;
        line-height: 1.45;
        padding: 0 16px 48px;
    }}
    header.navbar {{
        max-width: 1100px;
        margin: 0 auto;
        padding: 16px 0 12px;
        display: flex;
        flex-wrap: wrap;
        justify-content: space-between;
        row-gap: 12px;
        border-bottom: 1px solid var(--border-card);
    }}
    .brand-name {{ font-size: 16px; font-weight: 600; }}
    .brand-tagline {{ font-size: 12px; color: var(--text-dim); display: block; }}
    nav.navlinks {{ display: flex; flex-wrap: wrap; gap: 8px 16px; font-size: 14px; font-weight: 500; }}
    nav.navlinks a {{ color: var(--accent-bg); text-decoration: none; }}
    main.page {{ max-width: 1100px; margin: 24px auto 0; display: grid; row-gap: 24px; }}
    .card {{
        background: var(--bg-card);
        border: 1px solid var(--border-card);
        border-radius: var(--radius-card);
        padding: 20px 24px;
    }}
    .section-heading {{ font-size: 20px; font-weight: 600; margin: 0 0 8px; }}
    .subtext, .muted {{ font-size: 13px; color: var(--text-dim); }}
    .grid {{ display: grid; grid-template-columns: repeat(auto-fit,minmax(min(220px,100%),1fr)); gap: 16px; }}
    .stat {{ font-size: 22px; font-weight: 600; }}
    .table-wrap {{ overflow-x: auto; }}
    table {{ width: 100%; border-collapse: collapse; font-size: 13px; }}
    th {{ text-align: left; padding: 8px 6px; border-bottom: 1px solid var(--border-card); white-space: nowrap; }}
    td {{ padding: 8px 6px; border-bottom: 1px solid #f1f5f9; vertical-align: top; }}
    .pill {{ display: inline-block; font-size: 12px; padding: 2px 8px; border-radius: 999px; background: #f3f4f6; }}
    .pill-pending {{ background: #fef9c3; color: #854d0e; }}
    .pill-approved {{ background: #dcfce7; color: #166534; }}
    .pill-rejected {{ background: #fee2e2; color: #991b1b; }}
    .flash {{ max-width: 1100px; margin: 16px auto 0; padding: 10px 14px; border-radius: 8px; font-size: 14px; }}
    .flash-ok {{ background: #dcfce7; color: #166534; }}
    .flash-error {{ background: #fee2e2; color: #991b1b; }}
    .form-row {{ display: flex; flex-wrap: wrap; gap: 12px; margin: 0 0 16px; }}
    .form-col {{ flex: 1 1 200px; }}
    label.label-small {{ font-size: 12px; font-weight: 500; display: block; margin-bottom: 4px; }}
    input, select, textarea {{ width: 100%; font-size: 14px; padding: 8px 10px; border-radius: 8px; border: 1px solid #d1d5db; }}
    form.inline {{ display: inline; }}
    button.button-primary, button.button-small {{
        border: none;
        background: var(--accent-bg);
        color: #fff;
        border-radius: 8px;
        font-weight: 600;
        cursor: pointer;
    }}
    button.button-primary {{ font-size: 14px; padding: 10px 14px; }}
    button.button-small {{ font-size: 12px; padding: 4px 8px; margin: 0 2px; }}
    button:disabled {{ background: #9ca3af; cursor: not-allowed; }}
    .page-link {{ padding: 4px 10px; margin-left: 8px; color: var(--accent-bg); }}
    .task-grid {{ display: grid; grid-template-columns: repeat(auto-fill,minmax(120px,1fr)); gap: 10px; }}
    .task-cell {{ border: 1px solid var(--border-card); border-radius: 10px; padding: 10px; text-align: center; font-size: 13px; }}
    .task-done {{ background: #dcfce7; }}
    .task-locked {{ opacity: 0.5; }}
    canvas#effects {{ position: fixed; inset: 0; pointer-events: none; z-index: 50; }}
</style>
</head>
<body>
<header class="navbar">
  <div>
    <span class="brand-name">Storefront</span>
    {greeting}
  </div>
  <nav class="navlinks">
    {nav_links}
  </nav>
</header>
{notices}
<main class="page">
{body_html}
</main>
</body>
</html>
"""
