"""
Block synchronizer.

Compares the fence currently following a reference with the freshly
extracted snippet and decides whether to leave it, replace it or insert a
new one.
"""

from typing import List, Optional, Union
import logging

from snips.schemas import (
    ExtractedBlock,
    FencedBlock,
    Reference,
    SyncAction,
    SyncError,
    SyncResult,
)

logger = logging.getLogger(__name__)

MIN_FENCE_LENGTH = 3


def fence_for(lines: List[str]) -> str:
    """
    Choose a backtick fence that no content line can close.

    Args:
        lines: Snippet lines

    Returns:
        Three backticks, or one more than the longest backtick run that opens a line
    """
    longest = 0
    for line in lines:
        stripped = line.lstrip()
        run = len(stripped) - len(stripped.lstrip("`"))
        longest = max(longest, run)
    return "`" * max(MIN_FENCE_LENGTH, longest + 1)


def render_block(block: ExtractedBlock, indent: str = "") -> List[str]:
    """
    Render an extracted block as fence lines at the reference's indentation.

    Blank lines are not indented, so they carry no trailing whitespace.
    """
    fence = fence_for(block.lines)
    rendered = [f"{indent}{fence}{block.language_tag or ''}"]
    rendered.extend(f"{indent}{line}" if line.strip() else line for line in block.lines)
    rendered.append(f"{indent}{fence}")
    return rendered


class BlockSynchronizer:
    """Decide the synchronization action for one reference."""

    def synchronize(
        self,
        reference: Reference,
        extracted: Union[ExtractedBlock, Exception],
        fence: Optional[FencedBlock] = None
    ) -> SyncResult:
        """
        Reconcile one reference.

        Args:
            reference: The documentation reference
            extracted: Fresh block, or the exception raised while extracting it
            fence: The fence currently following the reference, if any

        Returns:
            SyncResult: UNCHANGED iff the fence matches byte-for-byte (tag
            included), REPLACE when it differs, INSERT_MISSING when there is
            no fence, ERROR when extraction failed
        """
        if isinstance(extracted, Exception):
            logger.debug(f"{reference.marker}: {extracted}")
            return SyncResult(
                reference=reference,
                action=SyncAction.ERROR,
                old_fence=fence,
                error=SyncError.from_exception(extracted, reference.line_number),
            )

        rendered = render_block(extracted, reference.indent)

        if fence is None:
            action = SyncAction.INSERT_MISSING
        elif fence.lines == rendered:
            action = SyncAction.UNCHANGED
        else:
            action = SyncAction.REPLACE

        logger.debug(f"{reference.marker} (line {reference.line_number}): {action.value}")

        return SyncResult(
            reference=reference,
            action=action,
            old_fence=fence,
            new_block=extracted,
            rendered=rendered,
        )


def synchronize(
    reference: Reference,
    extracted: Union[ExtractedBlock, Exception],
    fence: Optional[FencedBlock] = None
) -> SyncResult:
    """Convenience function wrapping BlockSynchronizer.synchronize."""
    return BlockSynchronizer().synchronize(reference, extracted, fence)
