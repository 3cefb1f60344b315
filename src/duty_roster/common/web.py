from __future__ import annotations

from functools import wraps
from typing import Callable, Optional

from flask import flash, g, jsonify, redirect, render_template, request, session, url_for

from ..users.model import User


def current_user(loader: Callable[[Optional[str]], Optional[User]]) -> Optional[User]:
    """Resolve the signed-in resident once per request."""
    if "current_user" not in g:
        g.current_user = loader(session.get("netid"))
    return g.current_user


def wants_json() -> bool:
    return request.path.startswith("/api/") or request.is_json


def render_forbidden():
    return render_template("403.html", current_user=g.get("current_user")), 403


def login_required(loader: Callable[[Optional[str]], Optional[User]]):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if current_user(loader) is None:
                session.pop("netid", None)
                if wants_json():
                    return jsonify({"success": False, "message": "Please sign in."}), 401
                flash("Please sign in to continue.", "warning")
                return redirect(url_for("login", next=request.path))
            return view(*args, **kwargs)

        return wrapper

    return decorator


def admin_required(loader: Callable[[Optional[str]], Optional[User]]):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = current_user(loader)
            if user is None:
                return redirect(url_for("login", next=request.path))
            if not user.admin:
                return render_forbidden()
            return view(*args, **kwargs)

        return wrapper

    return decorator
