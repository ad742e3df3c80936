"""
Closed set of Xcode capabilities that can be switched on for a target.

Each member carries the capability identifier written into the project's
`TargetAttributes`, whether it needs an entitlements file, the framework it
links (if any), and whether that framework is only added on request.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Capability(Enum):
    APPLE_PAY = ("com.apple.ApplePay", True, None, False)
    APP_GROUPS = ("com.apple.ApplicationGroups.iOS", True, None, False)
    ASSOCIATED_DOMAINS = ("com.apple.SafariKeychain", True, None, False)
    BACKGROUND_MODES = ("com.apple.BackgroundModes", False, None, False)
    DATA_PROTECTION = ("com.apple.DataProtection", True, None, False)
    GAME_CENTER = ("com.apple.GameCenter", False, "GameKit.framework", False)
    HEALTH_KIT = ("com.apple.HealthKit", True, "HealthKit.framework", False)
    HOME_KIT = ("com.apple.HomeKit", True, "HomeKit.framework", False)
    ICLOUD = ("com.apple.iCloud", True, "CloudKit.framework", True)
    IN_APP_PURCHASE = ("com.apple.InAppPurchase", False, None, False)
    INTER_APP_AUDIO = ("com.apple.InterAppAudio", True, "AudioToolbox.framework", False)
    KEYCHAIN_SHARING = ("com.apple.KeychainSharing", True, None, False)
    MAPS = ("com.apple.Maps.iOS", False, "MapKit.framework", False)
    PERSONAL_VPN = ("com.apple.VPNLite", True, "NetworkExtension.framework", False)
    PUSH_NOTIFICATIONS = ("com.apple.Push", True, None, False)
    SIRI = ("com.apple.Siri", True, None, False)
    WALLET = ("com.apple.Wallet", True, "PassKit.framework", False)
    WIRELESS_ACCESSORY_CONFIGURATION = ("com.apple.WAC", True, "ExternalAccessory.framework", False)

    def __init__(self, identifier: str, requires_entitlements: bool, framework: Optional[str], optional_framework: bool) -> None:
        self.identifier = identifier
        self.requires_entitlements = requires_entitlements
        self.framework = framework
        self.optional_framework = optional_framework

    @classmethod
    def from_identifier(cls, identifier: str) -> Optional["Capability"]:
        for member in cls:
            if member.identifier == identifier:
                return member
        return None

    def framework_to_add(self, add_optional: bool = False) -> Optional[str]:
        if self.framework is None:
            return None
        if self.optional_framework and not add_optional:
            return None
        return self.framework
