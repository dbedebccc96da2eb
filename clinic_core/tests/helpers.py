# clinic_core/tests/helpers.py

def bearer(token):
    return {"HTTP_AUTHORIZATION": f"Bearer {token}"}


def error_of(response):
    """The error object of the standard envelope."""
    return response.json()["error"]
