from drf_spectacular.extensions import OpenApiAuthenticationExtension


class IdentityServiceAuthenticationScheme(OpenApiAuthenticationExtension):
    target_class = "clinic_core.iam.auth.IdentityServiceAuthentication"
    name = "BearerToken"

    def get_security_definition(self, auto_schema):
        return {
            "type": "http",
            "scheme": "bearer",
            "description": (
                "Send the token issued by the identity service via "
                "`Authorization: Bearer <token>`. Patient operations require the admin role."
            ),
        }
