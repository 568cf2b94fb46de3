from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from src.application.dtos.common_dto import NotificationView
from src.domain.entities.profile import ProfileEntity

FormType = Literal["personal", "billing", "preferences"]


class ProfileResponse(BaseModel):
    """A user's stored profile."""
    id: str = Field(..., description="User id the profile belongs to")
    full_name: str = Field("", examples=["Ada Lovelace"])
    username: str = Field("", description="Email address shown on the profile", examples=["ada@example.com"])
    website: str = Field("", description="LinkedIn profile URL")
    billing_address: str = ""
    phone_number: str = ""
    company_name: str = ""

    @classmethod
    def from_entity(cls, entity: ProfileEntity) -> ProfileResponse:
        return cls(id=entity.id, **entity.editable_fields())


class ProfileDraftBody(BaseModel):
    """The complete form draft. Every field is sent on every submit."""
    full_name: str = Field(..., examples=["Ada Lovelace"])
    username: str = Field(..., examples=["ada@example.com"])
    website: str = Field(..., examples=["https://linkedin.com/in/ada"])
    billing_address: str = Field(...)
    phone_number: str = Field(...)
    company_name: str = Field(...)


class FormFieldView(BaseModel):
    name: str = Field(..., examples=["full_name"])
    label: str = Field(..., examples=["Full Name"])
    value: str = Field("", description="Current draft value")
    placeholder: str | None = None


class ActionView(BaseModel):
    name: str = Field(..., examples=["extend_subscription"])
    label: str = Field(..., examples=["Extend Subscription"])
    plan_id: str | None = Field(None, examples=["price_copper_weekly"])


class SubscriptionSummaryView(BaseModel):
    plan: str = Field(..., description="Subscription plan name")
    started: str = Field(..., description="Current period start", examples=["November 14th, 2023"])
    expires: str = Field(..., description="Current period end", examples=["November 21st, 2023"])
    extend_action: ActionView


class SubmitButtonView(BaseModel):
    label: str = Field(..., examples=["Save Changes"])
    disabled: bool = False


class ProfileFormView(BaseModel):
    """One tab of the profile form."""
    type: FormType
    title: str = Field(..., examples=["Personal Information"])
    fields: list[FormFieldView] = Field(default_factory=list)
    subscription: SubscriptionSummaryView | None = None
    subscription_unavailable: bool = Field(
        False, description="True when the subscription read failed rather than returning nothing"
    )
    message: str | None = None
    submit: SubmitButtonView


class SubmitProfileResponse(BaseModel):
    ok: bool
    form: ProfileFormView
    notifications: list[NotificationView] = Field(default_factory=list)


class SubscriptionDetailsResponse(BaseModel):
    subscription: SubscriptionSummaryView | None = None


class ExtendSubscriptionResponse(BaseModel):
    plan_id: str = Field(..., examples=["price_copper_weekly"])
    checkout_url: str | None = Field(None, description="Where to send the user to pay")
