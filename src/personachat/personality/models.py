from pydantic import BaseModel, ConfigDict, Field


class Personality(BaseModel):
    """A named persona preset compiled into the system prompt."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Display name of the persona")
    first_person: str = Field(description="How the persona refers to itself")
    user_calling: str = Field(description="Default term the persona uses for the user")
    is_user_overridable: bool = Field(
        default=False,
        description="Whether the user's name replaces the default address term",
    )
    user_calling_out: str = Field(
        default="",
        description="Honorific appended to the user's name when it is used",
    )
    constraints: tuple[str, ...] = Field(default=(), description="Rules the persona follows")
    tone_examples: tuple[str, ...] = Field(default=(), description="Sample lines showing the tone")
    behavior_examples: tuple[str, ...] = Field(default=(), description="Sample behaviors")

    def address_term(self, user_name: str) -> str:
        """Resolve how the persona addresses the user.

        The user's name plus the honorific is used only when the persona
        allows it and a name was given; otherwise the fixed default applies.
        """
        if self.is_user_overridable and user_name:
            return f"{user_name}{self.user_calling_out}"
        return self.user_calling
