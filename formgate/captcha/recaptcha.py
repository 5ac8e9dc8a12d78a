# SPDX-License-Identifier: Apache-2.0

import collections

import orjson
import structlog

from zope.interface import implementer

from formgate.i18n import localize as _

from . import CaptchaError
from .challenge import SCRIPT_SRC_URL, render_challenge
from .interfaces import Decision, ICaptchaService, Verdict
from .transports import TransportError, TransportUnavailable

logger = structlog.get_logger(__name__)

VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"

# Tokens issued by the subscribe page challenge are bound to this action.
EXPECTED_ACTION = "subscribe"

THRESHOLD_MIN = 0.1
THRESHOLD_MAX = 0.9
DEFAULT_THRESHOLD = "0.5"
DEFAULT_TIMEOUT = 10

# Error codes returned by the remote service, plus the ones added locally when
# a verdict fails the policy checks.
E_MISSING_INPUT_SECRET = "missing-input-secret"
E_INVALID_INPUT_SECRET = "invalid-input-secret"
E_MISSING_INPUT_RESPONSE = "missing-input-response"
E_INVALID_INPUT_RESPONSE = "invalid-input-response"
E_BAD_REQUEST = "bad-request"
E_TIMEOUT_OR_DUPLICATE = "timeout-or-duplicate"
E_UNKNOWN_ERROR = "unknown-error"
E_HOSTNAME_MISMATCH = "hostname-mismatch"
E_ACTION_MISMATCH = "action-mismatch"
E_SCORE_THRESHOLD_NOT_MET = "score-threshold-not-met"

REJECTED_MESSAGE = "Rejected by reCAPTCHA"

Policy = collections.namedtuple(
    "Policy", ("expected_action", "expected_hostname", "score_threshold")
)


class RecaptchaError(CaptchaError):
    pass


class MalformedResponseError(TransportError, RecaptchaError):
    pass


class VerificationError(RecaptchaError):
    def __init__(self, verdict):
        super().__init__(", ".join(verdict.error_codes))
        self.verdict = verdict

    @property
    def error_codes(self):
        return self.verdict.error_codes


class MissingInputSecretError(VerificationError):
    pass


class InvalidInputSecretError(VerificationError):
    pass


class MissingInputResponseError(VerificationError):
    pass


class InvalidInputResponseError(VerificationError):
    pass


class BadRequestError(VerificationError):
    pass


class TimeoutOrDuplicateError(VerificationError):
    pass


class HostnameMismatchError(VerificationError):
    pass


class ActionMismatchError(VerificationError):
    pass


class ScoreThresholdNotMetError(VerificationError):
    pass


# https://developers.google.com/recaptcha/docs/verify#error_code_reference
ERROR_CODE_MAP = {
    E_MISSING_INPUT_SECRET: MissingInputSecretError,
    E_INVALID_INPUT_SECRET: InvalidInputSecretError,
    E_MISSING_INPUT_RESPONSE: MissingInputResponseError,
    E_INVALID_INPUT_RESPONSE: InvalidInputResponseError,
    E_BAD_REQUEST: BadRequestError,
    E_TIMEOUT_OR_DUPLICATE: TimeoutOrDuplicateError,
    E_HOSTNAME_MISMATCH: HostnameMismatchError,
    E_ACTION_MISMATCH: ActionMismatchError,
    E_SCORE_THRESHOLD_NOT_MET: ScoreThresholdNotMetError,
}


def clamp_threshold(value):
    """
    Coerce a configured threshold to a float within [0.1, 0.9].

    Anything that does not parse as a number counts as 0.0, and so ends up
    as the lower bound.
    """
    try:
        threshold = float(value)
    except (TypeError, ValueError):
        threshold = 0.0
    return max(THRESHOLD_MIN, min(threshold, THRESHOLD_MAX))


def _failed(*error_codes):
    return Verdict(
        success=False,
        action=None,
        hostname=None,
        score=None,
        challenge_ts=None,
        error_codes=tuple(error_codes),
    )


@implementer(ICaptchaService)
class Service:
    def __init__(
        self,
        *,
        request,
        transport,
        script_src_url,
        site_key,
        secret_key,
        policy,
        verify_url=VERIFY_URL,
        timeout=DEFAULT_TIMEOUT,
    ):
        self.request = request
        self.transport = transport
        self.script_src_url = script_src_url
        self.site_key = site_key
        self.secret_key = secret_key
        self.policy = policy
        self.verify_url = verify_url
        self.timeout = timeout

    @classmethod
    def create_service(cls, context, request):
        settings = request.registry.settings
        transport_class = settings.get("captcha.transport_class")
        return cls(
            request=request,
            transport=(
                transport_class.create(request)
                if transport_class is not None
                else None
            ),
            script_src_url=SCRIPT_SRC_URL,
            site_key=settings.get("recaptcha.site_key"),
            secret_key=settings.get("recaptcha.secret_key"),
            policy=Policy(
                expected_action=EXPECTED_ACTION,
                expected_hostname=settings.get("recaptcha.expected_hostname"),
                score_threshold=clamp_threshold(
                    settings.get("recaptcha.threshold", DEFAULT_THRESHOLD)
                ),
            ),
            verify_url=settings.get("recaptcha.verify_url", VERIFY_URL),
            timeout=float(settings.get("recaptcha.timeout", DEFAULT_TIMEOUT)),
        )

    @property
    def csp_policy(self):
        return {
            "script-src": [
                "https://www.google.com/recaptcha/",
                "https://www.gstatic.com/recaptcha/",
            ],
            "frame-src": [
                "https://www.google.com/recaptcha/",
            ],
        }

    @property
    def enabled(self):
        return bool(self.site_key and self.secret_key)

    def challenge(self, action=EXPECTED_ACTION):
        if not self.enabled:
            return None
        return render_challenge(
            self.site_key, action, script_src_url=self.script_src_url
        )

    def verify_response(self, response, remote_ip=None):
        if not self.enabled:
            logger.debug("recaptcha.disabled")
            return None

        if not response:
            raise MissingInputResponseError(_failed(E_MISSING_INPUT_RESPONSE))

        if self.transport is None:
            raise TransportUnavailable(
                "No transport available to reach the verification endpoint"
            )

        payload = {
            "secret": self.secret_key,
            "response": response,
        }
        if remote_ip:
            payload["remoteip"] = remote_ip

        body = self.transport.post(self.verify_url, payload, timeout=self.timeout)

        try:
            data = orjson.loads(body)
        except ValueError as e:
            raise MalformedResponseError(
                f'Unexpected data in response body: {body.decode("utf-8", "replace")}'
            ) from e

        if not isinstance(data, dict) or "success" not in data:
            raise MalformedResponseError(f"Missing 'success' key in response: {data}")

        verdict = self._apply_policy(self._parse_verdict(data))
        logger.debug("recaptcha.verdict", verdict=verdict._asdict())

        if not verdict.success:
            exc_tp = ERROR_CODE_MAP.get(verdict.error_codes[0], VerificationError)
            raise exc_tp(verdict)

        return verdict

    def validate(self, response, remote_ip=None):
        try:
            self.verify_response(response, remote_ip=remote_ip)
        except TransportError as exc:
            # Failing open here would let anyone who can block the call to the
            # remote service skip verification.
            logger.warning(
                "recaptcha.transport_error",
                error=str(exc),
                error_class=type(exc).__name__,
            )
            return Decision(accepted=False, message=str(_(REJECTED_MESSAGE)))
        except VerificationError as exc:
            logger.info("recaptcha.rejected", error_codes=list(exc.error_codes))
            if exc.error_codes == (E_SCORE_THRESHOLD_NOT_MET,):
                return Decision(accepted=False, message=str(_(REJECTED_MESSAGE)))
            return Decision(accepted=False, message=", ".join(exc.error_codes))

        return Decision(accepted=True, message="")

    def _parse_verdict(self, data):
        success = data["success"]
        if not isinstance(success, bool):
            raise MalformedResponseError(f"Invalid 'success' in response: {data}")

        error_codes = data.get("error-codes") or []
        if not isinstance(error_codes, list) or not all(
            isinstance(code, str) for code in error_codes
        ):
            raise MalformedResponseError(f"Invalid 'error-codes' in response: {data}")
        error_codes = tuple(error_codes)

        for key in ("action", "hostname"):
            if not isinstance(data.get(key), (str, type(None))):
                raise MalformedResponseError(f"Invalid '{key}' in response: {data}")

        if not success and not error_codes:
            error_codes = (E_UNKNOWN_ERROR,)

        score = data.get("score")
        if score is not None:
            if isinstance(score, bool):
                raise MalformedResponseError(f"Invalid score in response: {data}")
            try:
                score = float(score)
            except (TypeError, ValueError) as e:
                raise MalformedResponseError(f"Invalid score in response: {data}") from e

        return Verdict(
            success=success,
            action=data.get("action"),
            hostname=data.get("hostname"),
            score=score,
            # challenge_ts = timestamp of the challenge load
            # (ISO format yyyy-MM-dd'T'HH:mm:ssZZ)
            challenge_ts=data.get("challenge_ts"),
            error_codes=error_codes,
        )

    def _apply_policy(self, verdict):
        # The remote service already rejected it, its error codes say why.
        if not verdict.success:
            return verdict

        error_codes = list(verdict.error_codes)

        expected_hostname = self.policy.expected_hostname
        if expected_hostname and (
            (verdict.hostname or "").lower() != expected_hostname.lower()
        ):
            error_codes.append(E_HOSTNAME_MISMATCH)

        if self.policy.expected_action and (
            verdict.action != self.policy.expected_action
        ):
            error_codes.append(E_ACTION_MISMATCH)

        # Verdicts without a score were not scored remotely, nothing to compare.
        if verdict.score is not None and verdict.score < self.policy.score_threshold:
            error_codes.append(E_SCORE_THRESHOLD_NOT_MET)

        if error_codes:
            return verdict._replace(success=False, error_codes=tuple(error_codes))
        return verdict
