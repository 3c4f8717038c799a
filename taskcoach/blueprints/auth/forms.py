# taskcoach/blueprints/auth/forms.py
from __future__ import annotations

from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField
from wtforms.validators import DataRequired, Length

from ...errors import ValidationError


def _text_only(value):
    # JSON bodies can carry numbers/lists; anything but a string counts as missing
    return value if isinstance(value, str) else None


class ApiForm(FlaskForm):
    """FlaskForm fed from the JSON body (or form data) of the request."""

    class Meta:
        csrf = False

    def validate_or_raise(self) -> None:
        if self.validate_on_submit():
            return
        for name, errors in self.errors.items():
            label = getattr(self, name).label.text
            raise ValidationError(f"{label}: {errors[0]}")
        raise ValidationError()


class CredentialsForm(ApiForm):
    username = StringField("Username", filters=[_text_only], validators=[DataRequired(), Length(max=255)])
    password = PasswordField("Password", filters=[_text_only], validators=[DataRequired(), Length(max=1024)])


class RegisterForm(CredentialsForm):
    pass


class LoginForm(CredentialsForm):
    pass
