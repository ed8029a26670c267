"""
User Routes

POST   /user/signup                      - Create account
POST   /user/SignIn                      - Sign in, get credential
GET    /user/logout                      - Go offline
PUT    /user/updateAccount               - Update own account
DELETE /user/deleteAccount               - Delete own account
GET    /user/getUserData                 - Own account
GET    /user/getProfileData              - Public profile of any user
GET    /user/getAccountsByRecoveryEmail  - Accounts sharing a recovery e-mail
PUT    /user/updatePassword              - Change password
POST   /user/forgetPassword              - E-mail an OTP
PUT    /user/verifyOTPAndSetNewPassword  - Reset password with the OTP
"""

from fastapi import APIRouter, Depends

from jobsearch.api.deps import get_user_service
from jobsearch.core.auth import Identity, auth
from jobsearch.core.validation import validate
from jobsearch.schemas.schemas import (
    ForgetPasswordBody, MessageResponse, ProfileQuery, RecoveryEmailQuery,
    SignInBody, SignUpBody, TokenResponse, UpdateAccountBody,
    UpdatePasswordBody, VerifyOtpBody,
)
from jobsearch.services.user_service import UserService

router = APIRouter(prefix="/user", tags=["Users"])


@router.post("/signup", response_model=MessageResponse, status_code=201)
async def sign_up(
    data: SignUpBody = Depends(validate(SignUpBody)),
    users: UserService = Depends(get_user_service),
):
    """Create an account. Role defaults to User."""
    users.sign_up(data)
    return MessageResponse(message="signup successfully")


@router.post("/SignIn", response_model=TokenResponse)
async def sign_in(
    data: SignInBody = Depends(validate(SignInBody)),
    users: UserService = Depends(get_user_service),
):
    """
    Sign in with email, recovery email or mobile number.

    Send the returned token in the `token` header of later requests.
    """
    token = users.sign_in(data)
    return TokenResponse(message="SignIn successfully", token=token)


@router.get("/logout", response_model=MessageResponse)
async def logout(
    identity: Identity = Depends(auth()),
    users: UserService = Depends(get_user_service),
):
    users.logout(identity)
    return MessageResponse(message="Logout successfully")


@router.put("/updateAccount")
async def update_account(
    identity: Identity = Depends(auth()),
    data: UpdateAccountBody = Depends(validate(UpdateAccountBody)),
    users: UserService = Depends(get_user_service),
):
    """Update own account. Only provided fields are updated."""
    user = users.update_account(identity, data)
    return {"message": "Account updated successfully", "user": user}


@router.delete("/deleteAccount")
async def delete_account(
    identity: Identity = Depends(auth()),
    users: UserService = Depends(get_user_service),
):
    user = users.delete_account(identity)
    return {"message": "Account deleted successfully", "user": user}


@router.get("/getUserData")
async def get_user_data(
    identity: Identity = Depends(auth()),
    users: UserService = Depends(get_user_service),
):
    return {"message": "Success", "user": users.get_user_data(identity)}


@router.get("/getProfileData")
async def get_profile_data(
    query: ProfileQuery = Depends(validate(ProfileQuery, "query")),
    users: UserService = Depends(get_user_service),
):
    """Public profile: no password, recovery e-mail, status or OTP."""
    return users.get_profile(query.userId)


@router.get("/getAccountsByRecoveryEmail")
async def get_accounts_by_recovery_email(
    query: RecoveryEmailQuery = Depends(validate(RecoveryEmailQuery, "query")),
    users: UserService = Depends(get_user_service),
):
    return {"users": users.accounts_by_recovery_email(query.recoveryEmail)}


@router.put("/updatePassword", response_model=MessageResponse)
async def update_password(
    identity: Identity = Depends(auth()),
    data: UpdatePasswordBody = Depends(validate(UpdatePasswordBody)),
    users: UserService = Depends(get_user_service),
):
    users.update_password(identity, data)
    return MessageResponse(message="Password updated successfully")


@router.post("/forgetPassword", response_model=MessageResponse, status_code=201)
async def forget_password(
    data: ForgetPasswordBody = Depends(validate(ForgetPasswordBody)),
    users: UserService = Depends(get_user_service),
):
    """Send a 6-digit OTP, valid for 10 minutes, to the account's recovery e-mail."""
    await users.forget_password(data)
    return MessageResponse(message="OTP has been sent successfully")


@router.put("/verifyOTPAndSetNewPassword", response_model=MessageResponse)
async def verify_otp_and_set_new_password(
    data: VerifyOtpBody = Depends(validate(VerifyOtpBody)),
    users: UserService = Depends(get_user_service),
):
    users.verify_otp_and_set_password(data)
    return MessageResponse(message="Password updated successfully")
