from __future__ import annotations

import logging

from flask import Flask, abort, flash, redirect, render_template, request, session, url_for

from ..common.web import admin_required, current_user
from ..core.enums import DutyType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    load_user = container.user_service.find_user

    @app.route("/", endpoint="home")
    def home():
        user = current_user(load_user)
        if user is None:
            return redirect(url_for("login"))
        return redirect(url_for("view_duties", netid=user.netid))

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if not app.config.get("ALLOW_NETID_LOGIN", False):
            abort(404)

        if request.method == "POST":
            netid = request.form.get("netid", "")
            try:
                s_user = container.auth_service.login(netid)
                session.clear()
                session["netid"] = s_user.netid
                session["name"] = s_user.name
                flash(f"Signed in as {s_user.name}.", "success")

                target = request.args.get("next") or ""
                # only follow local paths
                if not target.startswith("/") or target.startswith("//"):
                    target = url_for("view_duties", netid=s_user.netid)
                return redirect(target)
            except (ValidationError, NotFoundError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Sign-in failed for %r", netid)
                flash("System error while signing in.", "danger")

        return render_template("login.html")

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("Signed out.", "info")
        return redirect(url_for("login"))

    @app.route("/admin/users", methods=["GET", "POST"], endpoint="admin_users")
    @admin_required(load_user)
    def admin_users():
        if request.method == "POST":
            try:
                container.user_service.save_user(
                    netid=request.form.get("netid", ""),
                    name=request.form.get("name", ""),
                    phone=request.form.get("phone", ""),
                    admin=request.form.get("admin") == "on",
                    assigns=request.form.getlist("assigns"),
                )
                flash("User saved.", "success")
                return redirect(url_for("admin_users"))
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Saving user failed")
                flash("System error while saving user.", "danger")

        users = container.user_service.list_users()
        return render_template("admin/users.html", users=users, duty_types=list(DutyType))

    @app.route("/admin/users/delete/<netid>", methods=["POST"], endpoint="delete_user")
    @admin_required(load_user)
    def delete_user(netid: str):
        try:
            container.user_service.delete_user(current=current_user(load_user), netid=netid)
            flash("User deleted.", "success")
        except (ValidationError, AuthorizationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Deleting user %s failed", netid)
            flash("System error while deleting user.", "danger")

        return redirect(url_for("admin_users"))
