# Overview: Identity-store procedures (credential lookup and sign-up).

from sqlalchemy import func, or_

from ..models import Login
from . import envelope_row, procedure


@procedure("sp_get_login_by_username")
def sp_get_login_by_username(session, p_username):
    # No row at all when the username is unknown
    login = (
        session.query(Login)
        .filter(func.lower(Login.username) == (p_username or "").lower())
        .one_or_none()
    )
    if login is None:
        return None
    return envelope_row(0, login.to_credentials())


@procedure("sp_create_user")
def sp_create_user(session, p_username, p_email, p_password_hash):
    duplicate = (
        session.query(Login.id)
        .filter(or_(
            func.lower(Login.username) == p_username.lower(),
            func.lower(Login.email) == p_email.lower(),
        ))
        .first()
    )
    if duplicate is not None:
        return envelope_row(409, code_field="errorcode")

    login = Login(
        username=p_username,
        email=p_email,
        password_hash=p_password_hash,
        is_admin=False,
    )
    session.add(login)
    session.flush()
    return envelope_row(
        0,
        {"id": login.id, "username": login.username, "email": login.email},
        code_field="errorcode",
    )
