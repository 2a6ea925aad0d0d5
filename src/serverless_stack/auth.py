"""
Auth construct for Serverless Stack apps
Creates a Cognito Identity Pool backed by a User Pool and/or federated providers,
with IAM roles for authenticated and unauthenticated identities
"""
import re
import logging
from typing import Dict, Any, Optional

from aws_cdk import (
    aws_cognito as _cognito,
    aws_iam as iam,
)
from constructs import Construct

from serverless_stack.app import get_app
from serverless_stack.util.permission import Permissions, attach_permissions_to_role

logger = logging.getLogger(__name__)

COGNITO_IDENTITY_PRINCIPAL = "cognito-identity.amazonaws.com"

# Login provider keys expected by Cognito Identity Pools
AMAZON_PROVIDER = "www.amazon.com"
FACEBOOK_PROVIDER = "graph.facebook.com"
GOOGLE_PROVIDER = "accounts.google.com"
TWITTER_PROVIDER = "api.twitter.com"
APPLE_PROVIDER = "appleid.apple.com"


class Auth(Construct):
    """
    Cognito Identity Pool with its authenticated/unauthenticated roles.

    Identities come from exactly one Cognito source (a new User Pool via
    ``cognito`` or an existing ``cognito_user_pool`` + ``cognito_user_pool_client``)
    plus any of the Auth0, Amazon, Apple, Facebook, Google and Twitter providers.
    Provider settings are dicts, e.g. ``facebook={"app_id": "..."}``.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        cognito: Optional[Dict[str, Any]] = None,
        cognito_user_pool: Optional[_cognito.IUserPool] = None,
        cognito_user_pool_client: Optional[_cognito.IUserPoolClient] = None,
        auth0: Optional[Dict[str, str]] = None,
        amazon: Optional[Dict[str, str]] = None,
        apple: Optional[Dict[str, str]] = None,
        facebook: Optional[Dict[str, str]] = None,
        google: Optional[Dict[str, str]] = None,
        twitter: Optional[Dict[str, str]] = None
    ) -> None:
        super().__init__(scope, construct_id)

        root = get_app(scope)
        cognito_props = cognito
        self.cognito_user_pool = None
        self.cognito_user_pool_client = None

        # Cognito Identity Providers (User Pool)
        _validate_cognito_sources(cognito_props, cognito_user_pool, cognito_user_pool_client)

        if cognito_props is not None:
            sign_in_aliases = cognito_props.get("sign_in_aliases")
            if not sign_in_aliases:
                raise ValueError(f'No sign_in_aliases defined for cognito in the "{construct_id}" Auth')
            if isinstance(sign_in_aliases, dict):
                sign_in_aliases = _cognito.SignInAliases(**sign_in_aliases)

            self.cognito_user_pool = _cognito.UserPool(
                self,
                "UserPool",
                user_pool_name=root.logical_prefixed_name(construct_id),
                self_sign_up_enabled=True,
                sign_in_aliases=sign_in_aliases,
                sign_in_case_sensitive=False
            )
            self.cognito_user_pool_client = _cognito.UserPoolClient(
                self,
                "UserPoolClient",
                user_pool=self.cognito_user_pool
            )
        elif cognito_user_pool is not None:
            self.cognito_user_pool = cognito_user_pool
            self.cognito_user_pool_client = cognito_user_pool_client

        cognito_identity_providers = []
        if self.cognito_user_pool and self.cognito_user_pool_client:
            cognito_identity_providers.append(
                _cognito.CfnIdentityPool.CognitoIdentityProviderProperty(
                    provider_name=self.cognito_user_pool.user_pool_provider_name,
                    client_id=self.cognito_user_pool_client.user_pool_client_id
                )
            )

        # OpenID Connect Providers (Auth0)
        open_id_connect_provider_arns = []

        if auth0 is not None:
            _require(auth0, "domain", f'No Auth0 domain defined for the "{construct_id}" Auth')
            _require(auth0, "client_id", f'No Auth0 client_id defined for the "{construct_id}" Auth')
            provider = iam.OpenIdConnectProvider(
                self,
                "Auth0Provider",
                url=normalize_provider_url(auth0["domain"]),
                client_ids=[auth0["client_id"]]
            )
            open_id_connect_provider_arns.append(provider.open_id_connect_provider_arn)

        # Social Identity Providers
        supported_login_providers = build_login_providers(
            construct_id,
            amazon=amazon,
            apple=apple,
            facebook=facebook,
            google=google,
            twitter=twitter
        )

        # Identity Pool
        self.cognito_cfn_identity_pool = _cognito.CfnIdentityPool(
            self,
            "IdentityPool",
            identity_pool_name=identity_pool_name(root.logical_prefixed_name(construct_id)),
            allow_unauthenticated_identities=True,
            cognito_identity_providers=cognito_identity_providers,
            supported_login_providers=supported_login_providers,
            open_id_connect_provider_arns=open_id_connect_provider_arns
        )
        self.iam_auth_role = self._create_auth_role(self.cognito_cfn_identity_pool)
        self.iam_unauth_role = self._create_unauth_role(self.cognito_cfn_identity_pool)

        _cognito.CfnIdentityPoolRoleAttachment(
            self,
            "IdentityPoolRoleAttachment",
            identity_pool_id=self.cognito_cfn_identity_pool.ref,
            roles={
                "authenticated": self.iam_auth_role.role_arn,
                "unauthenticated": self.iam_unauth_role.role_arn
            }
        )

        logger.debug(
            f"Created identity pool for {construct_id} with "
            f"{len(cognito_identity_providers)} user pool(s), "
            f"{len(open_id_connect_provider_arns)} OIDC provider(s) and "
            f"{len(supported_login_providers)} login provider(s)"
        )

    def _create_auth_role(self, identity_pool: _cognito.CfnIdentityPool) -> iam.Role:
        role = iam.Role(
            self,
            "IdentityPoolAuthRole",
            assumed_by=identity_pool_principal(identity_pool, "authenticated")
        )
        role.add_to_policy(
            iam.PolicyStatement(
                effect=iam.Effect.ALLOW,
                actions=[
                    "mobileanalytics:PutEvents",
                    "cognito-sync:*",
                    "cognito-identity:*"
                ],
                resources=["*"]
            )
        )
        return role

    def _create_unauth_role(self, identity_pool: _cognito.CfnIdentityPool) -> iam.Role:
        role = iam.Role(
            self,
            "IdentityPoolUnauthRole",
            assumed_by=identity_pool_principal(identity_pool, "unauthenticated")
        )
        role.add_to_policy(
            iam.PolicyStatement(
                effect=iam.Effect.ALLOW,
                actions=["mobileanalytics:PutEvents", "cognito-sync:*"],
                resources=["*"]
            )
        )
        return role

    def attach_permissions_for_auth_users(self, permissions: Permissions) -> None:
        attach_permissions_to_role(self.iam_auth_role, permissions)

    def attach_permissions_for_unauth_users(self, permissions: Permissions) -> None:
        attach_permissions_to_role(self.iam_unauth_role, permissions)


def _validate_cognito_sources(cognito_props, cognito_user_pool, cognito_user_pool_client) -> None:
    if cognito_props is not None and cognito_user_pool is not None:
        raise ValueError("Cannot define both cognito and cognito_user_pool")
    if cognito_props is not None and cognito_user_pool_client is not None:
        raise ValueError("Cannot define both cognito and cognito_user_pool_client")
    if (cognito_user_pool is None) != (cognito_user_pool_client is None):
        raise ValueError("Have to define both cognito_user_pool and cognito_user_pool_client")


def _require(props: Dict[str, str], key: str, message: str) -> None:
    if not props.get(key):
        raise ValueError(message)


def normalize_provider_url(domain: str) -> str:
    """Ensure an OIDC provider domain is an https URL"""
    return domain if domain.startswith("https://") else f"https://{domain}"


def identity_pool_name(name: str) -> str:
    """Identity pool names only allow word characters and spaces"""
    return re.sub(r"[^\w ]", "_", name)


def build_login_providers(
    construct_id: str,
    amazon: Optional[Dict[str, str]] = None,
    apple: Optional[Dict[str, str]] = None,
    facebook: Optional[Dict[str, str]] = None,
    google: Optional[Dict[str, str]] = None,
    twitter: Optional[Dict[str, str]] = None
) -> Dict[str, str]:
    """Build the supported login providers map for an identity pool"""
    providers = {}

    if amazon is not None:
        _require(amazon, "app_id", f'No Amazon app_id defined for the "{construct_id}" Auth')
        providers[AMAZON_PROVIDER] = amazon["app_id"]
    if facebook is not None:
        _require(facebook, "app_id", f'No Facebook app_id defined for the "{construct_id}" Auth')
        providers[FACEBOOK_PROVIDER] = facebook["app_id"]
    if google is not None:
        _require(google, "client_id", f'No Google client_id defined for the "{construct_id}" Auth')
        providers[GOOGLE_PROVIDER] = google["client_id"]
    if twitter is not None:
        _require(twitter, "consumer_key", f'No Twitter consumer_key defined for the "{construct_id}" Auth')
        _require(twitter, "consumer_secret", f'No Twitter consumer_secret defined for the "{construct_id}" Auth')
        providers[TWITTER_PROVIDER] = f"{twitter['consumer_key']};{twitter['consumer_secret']}"
    if apple is not None:
        _require(apple, "services_id", f'No Apple services_id defined for the "{construct_id}" Auth')
        providers[APPLE_PROVIDER] = apple["services_id"]

    return providers


def identity_pool_principal(identity_pool: _cognito.CfnIdentityPool, amr: str) -> iam.FederatedPrincipal:
    """Principal for identities of the pool with the given amr value"""
    return iam.FederatedPrincipal(
        COGNITO_IDENTITY_PRINCIPAL,
        conditions={
            "StringEquals": {
                f"{COGNITO_IDENTITY_PRINCIPAL}:aud": identity_pool.ref
            },
            "ForAnyValue:StringLike": {
                f"{COGNITO_IDENTITY_PRINCIPAL}:amr": amr
            }
        },
        assume_role_action="sts:AssumeRoleWithWebIdentity"
    )
