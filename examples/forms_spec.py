"""
Example specification for a forms API.

Run with:
    contract-test examples/forms_spec.py

`check`, `rnd` and `auth` are provided by the runner; no imports needed.
"""

base_url = "http://localhost:3000/api"

EMAIL = f"user{rnd()}@example.com"
PASSWORD = "s3cret-pass"


def remember_credentials(res, S):
    S.email = EMAIL
    S.password = PASSWORD
    S.userId = res.body["id"]


def store_token(res, S):
    S.token = res.body["token"]


def has_title(res, S):
    check.equal(res.body["title"], "Customer survey")


def store_form(res, S):
    S.formId = res.body["id"]


spec = {
    "auth": [
        ("register", "POST /auth/register", None,
         {"email": EMAIL, "password": PASSWORD}, 201, remember_credentials),
        ("login", "POST /auth/login", None,
         lambda S: {"email": S.email, "password": S.password}, 200, store_token),
        ("login with wrong password", "POST /auth/login", None,
         lambda S: {"email": S.email, "password": "nope"}, 401),
    ],
    "forms": [
        ("create form", "POST /forms", auth, {"title": "Customer survey"},
         201, has_title, store_form),
        ("get form", "GET /forms/:formId", auth, None, 200),
        ("list forms", "GET /forms", auth, None,
         lambda res: check.ok(isinstance(res.body, list))),
        ("forms need auth", "GET /forms", None, None, 401),
    ],
    "questions": [
        ("add question", "POST /forms/:formId/questions", auth,
         {"text": "How did we do?", "type": "rating"}, 201,
         lambda res, S: setattr(S, "questionId", res.body["id"])),
        ("delete question", "DELETE /forms/:formId/questions/:questionId", auth,
         None, lambda res: check.ok(res.status in (200, 204))),
    ],
}
