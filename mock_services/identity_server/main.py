from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uuid


def error(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": status_code, "message": message, "errors": [{"message": message}]}},
    )


def create_app() -> FastAPI:
    """In-memory stand-in for the identity provider's account API"""
    app = FastAPI(title="Mock Identity Server", version="1.0.0")
    app.state.users = {}  # email -> account dict
    app.state.tokens = {}  # idToken -> email

    def issue(account: dict) -> dict:
        token = uuid.uuid4().hex
        app.state.tokens[token] = account["email"]
        return {
            "localId": account["localId"],
            "email": account["email"],
            "displayName": account.get("displayName", ""),
            "idToken": token,
            "refreshToken": uuid.uuid4().hex,
            "expiresIn": "3600",
        }

    @app.get("/health")
    def health(): return {"status": "ok"}

    @app.post("/v1/accounts:signUp")
    async def sign_up(request: Request):
        body = await request.json()
        email, password = body.get("email", ""), body.get("password", "")
        if "@" not in email:
            return error("INVALID_EMAIL")
        if email in app.state.users:
            return error("EMAIL_EXISTS")
        if len(password) < 6:
            return error("WEAK_PASSWORD : Password should be at least 6 characters")
        account = {"localId": uuid.uuid4().hex, "email": email, "password": password, "disabled": False}
        app.state.users[email] = account
        return issue(account)

    @app.post("/v1/accounts:signInWithPassword")
    async def sign_in(request: Request):
        body = await request.json()
        email, password = body.get("email", ""), body.get("password", "")
        if "@" not in email:
            return error("INVALID_EMAIL")
        account = app.state.users.get(email)
        if account is None:
            return error("EMAIL_NOT_FOUND")
        if account["disabled"]:
            return error("USER_DISABLED")
        if account["password"] != password:
            return error("INVALID_PASSWORD")
        return issue(account)

    @app.post("/v1/accounts:update")
    async def update(request: Request):
        body = await request.json()
        email = app.state.tokens.get(body.get("idToken"))
        if email is None:
            return error("INVALID_ID_TOKEN")
        account = app.state.users[email]
        if "displayName" in body:
            account["displayName"] = body["displayName"]
        return {"localId": account["localId"], "email": email, "displayName": account.get("displayName", "")}

    return app


app = create_app()
