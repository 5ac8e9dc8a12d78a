# SPDX-License-Identifier: Apache-2.0

from zope.interface import Interface


class ISubscribePageDataStore(Interface):
    """
    Host storage for per subscribe page settings. formgate never persists
    anything itself, it hands the flags over to whatever the host registers.
    """

    def save(page_id, name, value):
        """
        Store ``value`` (a string) under ``name`` for the subscribe page
        identified by ``page_id``.
        """


class ISubscribePageHooks(Interface):
    def create_service(context, request):
        """
        Create the hooks for the given context and request.
        """

    def display_subscription_choice(page_data, user_id=0) -> str:
        """
        Return the HTML attaching the challenge to the subscribe form, or an
        empty string when the page does not use it.
        """

    def validate_subscription_page(page_data, submitted, client_ip, page=None) -> str:
        """
        Return an error message to be displayed, or an empty string when the
        submission may be accepted.
        """

    def display_subscribepage_edit(page_data) -> str:
        """
        Return the HTML for the reCAPTCHA options when editing a subscribe page.
        """

    def process_subscribepage_edit(page_id, submitted):
        """
        Hand the submitted reCAPTCHA options of a subscribe page to the host
        storage.
        """
