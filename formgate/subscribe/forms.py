# SPDX-License-Identifier: Apache-2.0

import wtforms

from formgate.i18n import localize as _

INCLUDE_FLAG = "recaptchav3_include"
NOT_ASUBSCRIBE_FLAG = "recaptchav3_not_asubscribe"


class UncheckableBooleanField(wtforms.BooleanField):
    """
    A checkbox paired with a hidden input carrying its unchecked value. Both
    are posted under the same name when checked, the checkbox comes last.
    """

    false_values = (False, "false", "", "0")

    def process_formdata(self, valuelist):
        super().process_formdata(valuelist[-1:])


class SubscribePageCaptchaForm(wtforms.Form):
    recaptchav3_include = UncheckableBooleanField(
        label=_("Include reCAPTCHA in the subscribe page"),
    )
    recaptchav3_not_asubscribe = UncheckableBooleanField(
        label=_("Do not validate reCAPTCHA for asubscribe"),
    )
