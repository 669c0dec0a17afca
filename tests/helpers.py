from app.domain.schemas import TokenClaims


def claims_for(user) -> TokenClaims:
    return TokenClaims(id=user.id, name=user.name, email=user.email, role=user.role)


def auth_header(tokens, user) -> dict:
    token = tokens.issue({"id": user.id, "name": user.name, "email": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}
