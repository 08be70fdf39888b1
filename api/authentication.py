from rest_framework import status
from rest_framework.permissions import AllowAny

from .exceptions import AuthError, ValidationError
from .serializers import (
    LoginSerializer,
    PasswordChangeSerializer,
    PlayerRegistrationSerializer,
    PlayerSerializer,
)
from .views import DracoAPIView


class RegisterView(DracoAPIView):
    """
    Allows new players to create an account.

    - Public: no token is read, so a stale Authorization header cannot block registration.
    - A taken username fails without touching the existing account.
    """
    authentication_classes = []
    permission_classes = [AllowAny]
    action_labels = {'post': ("Player creation", "Creation")}

    def post(self, request, *args, **kwargs):
        data = self.validated(PlayerRegistrationSerializer(data=request.data))
        self.ctx.players.register(data['username'], data['password'], data['name'])
        return self.respond(status_code=status.HTTP_201_CREATED)


class LoginView(DracoAPIView):
    """
    Exchanges a username and password for a bearer token.

    Unknown usernames and wrong passwords get the same 401 and the same message.
    """
    authentication_classes = []
    permission_classes = [AllowAny]
    action_labels = {'post': ("Player login", "Login")}

    def post(self, request, *args, **kwargs):
        data = self.validated(LoginSerializer(data=request.data))
        username = self.ctx.players.authenticate(data['username'], data['password'])
        token = self.ctx.tokens.issue(username)
        return self.respond({'username': username, 'token': token})


class PlayerDetailView(DracoAPIView):
    """
    Returns a player record. Players may only read their own.
    """
    action_labels = {'get': ("Player retrieval", "Retrieval")}

    def get(self, request, username, *args, **kwargs):
        if request.user.username != username:
            raise AuthError("Access denied", detail=f"{request.user.username} asked for {username}")
        player = self.ctx.players.get(username)
        return self.respond(PlayerSerializer(player).data)


class PlayerSelfView(DracoAPIView):
    """
    The caller's own account, identified only by the token.
    """
    action_labels = {
        'get': ("Player retrieval", "Retrieval"),
        'delete': ("Delete player account", "Deletion"),
    }

    def get(self, request, *args, **kwargs):
        return self.respond(PlayerSerializer(request.user).data)

    def delete(self, request, *args, **kwargs):
        self.ctx.players.delete(request.user.username)
        return self.respond()


class PasswordChangeView(DracoAPIView):
    """
    Allows a logged-in player to change their own password.

    The new password and its confirmation are trimmed; an empty value is a 422,
    a mismatch is a 400.
    """
    action_labels = {'put': ("Change player password", "Update")}

    def put(self, request, *args, **kwargs):
        data = self.validated(PasswordChangeSerializer(data=request.data))
        new_password = data['new_password']
        confirmation = data['confirmation']

        if not new_password or not confirmation:
            raise ValidationError("New password must be specified")

        if new_password != confirmation:
            raise ValidationError(
                "New password and confirmation do not match",
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        self.ctx.players.update_password(request.user.username, new_password)
        return self.respond()
