"""Friend-request and group-invite handling: switches, flags and notices."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

_APPLY = 0b001
_INVITE = 0b010
_MASTER = 0b100

_BASE = 0x4E00
_TAIL = 0x3D00
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_INT_RE = re.compile(r"[+-]?\d+")

_DECISION_RE = re.compile(r"^(同意|拒绝)(申请|邀请)\s*([一-踀]{4})\s*(.*)\Z")
_TOGGLE_RE = re.compile(r"^(开启|关闭)自动同意(申请|邀请|主人)\Z")


@dataclass
class Storage:
    """Per-owner auto-accept switches packed into one integer."""

    value: int = 0

    def set_apply(self, on: bool) -> None:
        """Switch automatic acceptance of friend requests."""
        if on:
            self.value |= _APPLY
        else:
            self.value &= _INVITE | _MASTER

    def set_invite(self, on: bool) -> None:
        """Switch automatic acceptance of group invites."""
        if on:
            self.value |= _INVITE
        else:
            self.value &= _APPLY | _MASTER

    def set_master(self, on: bool) -> None:
        """Set the bit that stops auto-accepting events from the owner."""
        if on:
            self.value |= _MASTER
        else:
            self.value &= _APPLY | _INVITE

    def is_apply_on(self) -> bool:
        return self.value & _APPLY > 0

    def is_invite_on(self) -> bool:
        return self.value & _INVITE > 0

    def is_master_off(self) -> bool:
        return self.value & _MASTER > 0

    def __int__(self) -> int:
        return self.value


def _b14_encode(data: bytes) -> str:
    chars: list[str] = []
    full = len(data) - len(data) % 7
    for start in range(0, full, 7):
        block = int.from_bytes(data[start:start + 7], "big")
        chars.extend(chr(_BASE + ((block >> shift) & 0x3FFF)) for shift in (42, 28, 14, 0))
    rest = data[full:]
    if rest:
        nbits = len(rest) * 8
        count = -(-nbits // 14)
        block = int.from_bytes(rest, "big") << (count * 14 - nbits)
        chars.extend(
            chr(_BASE + ((block >> (14 * (count - 1 - i))) & 0x3FFF)) for i in range(count)
        )
        chars.append(chr(_TAIL + len(rest)))
    return "".join(chars)


def _b14_decode(text: str) -> bytes:
    remainder = 0
    if text and _TAIL < ord(text[-1]) <= _TAIL + 6:
        remainder = ord(text[-1]) - _TAIL
        text = text[:-1]
    values = []
    for ch in text:
        code = ord(ch) - _BASE
        if not 0 <= code <= 0x3FFF:
            raise ValueError(f"invalid base16384 character {ch!r}")
        values.append(code)
    out = bytearray()
    full = len(values) - len(values) % 4
    for start in range(0, full, 4):
        block = 0
        for v in values[start:start + 4]:
            block = (block << 14) | v
        out += block.to_bytes(7, "big")
    rest = values[full:]
    if rest:
        block = 0
        for v in rest:
            block = (block << 14) | v
        nbits = len(rest) * 14
        nbytes = remainder or nbits // 8
        block >>= nbits - nbytes * 8
        out += block.to_bytes(nbytes, "big")
    elif remainder and len(out) >= 7:
        out = out[: len(out) - 7 + remainder]
    return bytes(out)


def encode_flag(flag: str) -> str:
    """Pack a decimal event flag into four base16384 characters."""
    if not _INT_RE.fullmatch(flag):
        raise ValueError(f"invalid flag {flag!r}")
    number = int(flag)
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise ValueError(f"flag {flag!r} out of range")
    raw = (number & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "big")
    return _b14_encode(raw[1:])


def decode_flag(encoded: str) -> str:
    """Turn four base16384 characters back into the decimal event flag."""
    data = _b14_decode(encoded)[:7]
    buf = bytearray(8)
    buf[1:1 + len(data)] = data
    return str(int.from_bytes(buf, "big", signed=True))


@dataclass(frozen=True)
class Decision:
    """An owner's answer to a pending request or invite."""

    command: str
    kind: str
    flag: str
    reason: str

    @property
    def approve(self) -> bool:
        return self.command == "同意"

    @property
    def is_invite(self) -> bool:
        return self.kind == "邀请"

    @property
    def reply(self) -> str:
        return "已" + self.command + self.kind


def parse_decision(text: str) -> Decision | None:
    """Parse "同意/拒绝 申请/邀请 <flag> [reason]", or return None."""
    m = _DECISION_RE.match(text)
    if m is None:
        return None
    command, kind, encoded, reason = m.groups()
    return Decision(command, kind, decode_flag(encoded), reason)


def parse_toggle(text: str) -> tuple[str, str] | None:
    """Parse "开启/关闭自动同意申请/邀请/主人" into (option, target)."""
    m = _TOGGLE_RE.match(text)
    if m is None:
        return None
    return m.group(1), m.group(2)


def apply_toggle(storage: Storage, option: str, target: str) -> str:
    """Apply a parsed toggle to the switches and return the confirmation text."""
    on = option == "开启"
    if target == "申请":
        storage.set_apply(on)
    elif target == "邀请":
        storage.set_invite(on)
    elif target == "主人":
        storage.set_master(option == "关闭")
    else:
        raise ValueError(f"unknown target {target!r}")
    return "已设置自动同意" + target + "为" + option


def _when(now) -> str:
    if isinstance(now, (int, float)):
        now = datetime.fromtimestamp(now)
    if isinstance(now, datetime):
        return now.strftime("%Y-%m-%d %H:%M:%S")
    return str(now)


def format_invite_notice(now, username, userid, groupname, groupid, encoded, accepted) -> list[str]:
    """Return the forward-message nodes sent to the owner about a group invite."""
    body = (
        "在" + _when(now) + "收到来自"
        + "\n用户:[" + username + "](" + str(userid) + ")的群聊邀请"
        + "\n群聊:[" + groupname + "](" + str(groupid) + ")"
    )
    if accepted:
        return ["已自动同意" + body + "\nflag:" + encoded]
    return [body + "\n请在下方复制flag并在前面加上:" + "\n同意/拒绝邀请，来决定同意还是拒绝", encoded]


def format_friend_notice(now, username, userid, comment, encoded, accepted) -> list[str]:
    """Return the forward-message nodes sent to the owner about a friend request."""
    body = (
        "在" + _when(now) + "收到来自"
        + "\n用户:[" + username + "](" + str(userid) + ")"
        + "\n的好友请求:" + comment
    )
    if accepted:
        return ["已自动同意" + body + "\nflag:" + encoded]
    return [body + "\n请在下方复制flag并在前面加上:" + "\n同意/拒绝申请，来决定同意还是拒绝", encoded]