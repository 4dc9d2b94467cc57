from allauth.socialaccount.signals import social_account_added
from allauth.socialaccount.signals import social_account_updated
from django.dispatch import receiver


@receiver(social_account_added)
@receiver(social_account_updated)
def remember_google_id(sender, request, sociallogin, **kwargs):
    account = sociallogin.account
    user = sociallogin.user
    if account.provider == "google" and user.pk and user.google_id != account.uid:
        user.google_id = account.uid
        user.save(update_fields=["google_id"])
