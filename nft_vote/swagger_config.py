def swagger_template(app=None):
    title = "NFT Voting API"
    version = "1.0.0"

    if app:
        title = app.config.get("SWAGGER_TITLE", title)
        version = app.config.get("SWAGGER_VERSION", version)

    return {
        "swagger": "2.0",
        "info": {"title": title, "version": version},
        "securityDefinitions": {
            "BearerAuth": {
                "type": "apiKey",
                "name": "Authorization",
                "in": "header",
                "description": "JWT Authorization header: Bearer <token>"
            }
        },
        "definitions": {
            "ErrorResponse": {
                "type": "object",
                "properties": {
                    "success": {"type": "boolean", "example": False},
                    "error": {"type": "string", "example": "Validation error"},
                    "code": {"type": "string", "example": "VALIDATION_ERROR"},
                    "details": {"type": "object"},
                    "request_id": {"type": "string"}
                }
            },
            "User": {
                "type": "object",
                "properties": {
                    "id": {"type": "string", "example": "user_3f9c0a7e21b44d0c"},
                    "email": {"type": "string", "example": "voter@example.com"},
                    "walletAddress": {"type": "string", "example": "addr1q..."},
                    "authMethod": {"type": "string", "example": "email"},
                    "role": {"type": "string", "example": "voter"}
                }
            },
            "VotingOption": {
                "type": "object",
                "properties": {
                    "id": {"type": "string", "example": "1"},
                    "title": {"type": "string", "example": "Option A"},
                    "description": {"type": "string"},
                    "votes": {"type": "integer", "example": 45}
                }
            }
        }
    }
