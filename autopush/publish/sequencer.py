"""Publish run: sync the branch, commit, derive a tag, push.

``PublishSequencer.run`` walks

    init -> branch_ensured -> classified -> bumped -> resolved
         -> tagged -> pushed -> done

and stops in ``failed`` on the first error. Nothing already pushed is rolled
back. Each step receives the session built by the previous one and returns
a new one; the sequencer itself keeps no per-run state.

Usage:
    sequencer = PublishSequencer(
        git=Repository(Path.cwd()),
        decisions=ScriptedDecisions(category=ChangeCategory.FIX, description="typo"),
        console=RichConsole(),
    )
    match sequencer.run():
        case Ok(session):
            print(session.tag.name)
        case Err(failure):
            print(failure.error.message)
"""

from __future__ import annotations

from dataclasses import replace

from autopush.core.result import Err, Ok, Result
from autopush.git.repository import GitError
from autopush.output.console import ConsoleProtocol, Style
from autopush.publish.bump import ChangeCategory, bump, is_breaking, parse_commit_subject
from autopush.publish.config import INITIAL_COMMIT_MESSAGE, PublishConfig
from autopush.publish.decisions import DecisionProvider
from autopush.publish.errors import PublishError, PublishErrorKind, PublishFailure
from autopush.publish.fsm import FINISH, StepHandler, StepOutcome, advance, run_state_machine
from autopush.publish.model import (
    CommitDecision,
    PublishContext,
    PublishSession,
    PublishState,
    Tag,
)
from autopush.publish.ports import GitOperations
from autopush.publish.resolver import resolve_against_remote
from autopush.publish.retry import retry
from autopush.publish.semver import parse_tag

NEUTRAL_CATEGORY = ChangeCategory.OTHER

type _StepResult = Result[StepOutcome[PublishSession], PublishError]


def _fail(
    kind: PublishErrorKind, message: str, error: GitError | None = None
) -> Err[PublishError]:
    return Err(PublishError(kind=kind, message=message, hint=error.message if error else None))


class PublishSequencer:
    def __init__(
        self,
        *,
        git: GitOperations,
        decisions: DecisionProvider,
        console: ConsoleProtocol,
        config: PublishConfig | None = None,
        trace_steps: bool = False,
    ) -> None:
        self._git = git
        self._decisions = decisions
        self._console = console
        self._config = config or PublishConfig()
        self._trace_steps = trace_steps

    def run(self) -> Result[PublishSession, PublishFailure]:
        handlers: dict[str, StepHandler[PublishSession]] = {
            PublishState.INIT: self._ensure_branch,
            PublishState.BRANCH_ENSURED: self._classify,
            PublishState.CLASSIFIED: self._bump,
            PublishState.BUMPED: self._resolve,
            PublishState.RESOLVED: self._tag,
            PublishState.TAGGED: self._push,
            PublishState.PUSHED: self._report,
            PublishState.DONE: lambda _: Ok(FINISH),
        }
        return run_state_machine(
            initial_state=PublishSession(),
            get_step=lambda s: s.state.value,
            handlers=handlers,
            on_advance=self._trace if self._trace_steps else None,
        )

    def _trace(self, session: PublishSession) -> None:
        self._console.print(f"-> {session.state.value}", Style.DIM)

    # -- init -> branch_ensured -------------------------------------------

    def _ensure_branch(self, session: PublishSession) -> _StepResult:
        cfg = self._config
        if not self._git.exists():
            bootstrap = self._bootstrap()
            if isinstance(bootstrap, Err):
                return bootstrap

        branch = self._git.current_branch()
        if branch is None:
            return _fail("branch_sync", "Failed to determine the current branch (detached HEAD?)")

        context = PublishContext(
            current_branch=branch,
            is_main_branch=branch == cfg.primary_branch,
            working_tree_dirty=self._git.is_working_tree_dirty(),
        )

        if context.is_main_branch:
            self._console.info(f"On {cfg.primary_branch}, pulling latest changes...")
            pulled = self._git.pull_ff(cfg.remote, cfg.primary_branch)
            if isinstance(pulled, Err):
                return _fail(
                    "branch_sync",
                    f"Failed to pull changes from {cfg.primary_branch} branch.",
                    pulled.error,
                )
            upstream_pending = False
        else:
            synced = self._sync_primary(context)
            if isinstance(synced, Err):
                return synced
            context = synced.value

            published = self._publish_new_branch(context)
            if isinstance(published, Err):
                return published
            upstream_pending = published.value

        return Ok(
            advance(
                replace(
                    session,
                    state=PublishState.BRANCH_ENSURED,
                    context=context,
                    upstream_pending=upstream_pending,
                )
            )
        )

    def _bootstrap(self) -> Result[None, PublishError]:
        cfg = self._config
        self._console.warning("No Git repository found. Initializing...")
        init = self._git.init()
        if isinstance(init, Err):
            return _fail("repository_init", "Failed to initialize Git repository.", init.error)

        url = self._decisions.remote_url().strip()
        if not url:
            return _fail("remote_configuration", "Failed to add remote: no URL given.")
        added = self._git.add_remote(cfg.remote, url)
        if isinstance(added, Err):
            return _fail("remote_configuration", "Failed to add remote.", added.error)

        created = self._git.create_branch(cfg.primary_branch)
        if isinstance(created, Err):
            return _fail(
                "repository_init",
                f"Failed to create {cfg.primary_branch} branch.",
                created.error,
            )

        staged = self._git.stage_all()
        if isinstance(staged, Err):
            return _fail("commit", "Failed to stage files.", staged.error)
        committed = self._git.commit(INITIAL_COMMIT_MESSAGE)
        if isinstance(committed, Err):
            return _fail("commit", "Failed to commit changes.", committed.error)

        return self._push_with_retry(cfg.primary_branch, what="branch", set_upstream=True)

    def _sync_primary(self, context: PublishContext) -> Result[PublishContext, PublishError]:
        """Pull the primary branch without losing the working tree.

        Dirty changes are stashed before leaving the branch and popped after
        coming back. Restoration is attempted on every failure path; if it
        fails too, its error is attached to the original one.
        """
        cfg = self._config
        branch = context.current_branch

        if context.working_tree_dirty:
            self._console.info("Stashing local changes...")
            stashed = self._git.stash()
            if isinstance(stashed, Err):
                return _fail("branch_sync", "Failed to stash changes.", stashed.error)
            context = replace(context, stash_taken=True)

        self._console.info(f"Switching to {cfg.primary_branch} to pull recent changes...")
        left = self._git.checkout(cfg.primary_branch)
        if isinstance(left, Err):
            failure = PublishError(
                kind="branch_sync",
                message=f"Failed to switch to {cfg.primary_branch} branch.",
                hint=left.error.message,
            )
            return Err(self._with_restore(failure, context, switched=False))

        pulled = self._git.pull_ff(cfg.remote, cfg.primary_branch)
        if isinstance(pulled, Err):
            failure = PublishError(
                kind="branch_sync",
                message=f"Failed to pull changes from {cfg.primary_branch} branch.",
                hint=pulled.error.message,
            )
            return Err(self._with_restore(failure, context, switched=True))

        self._console.info(f"Switching back to {branch}...")
        restored = self._restore(context, switched=True)
        if isinstance(restored, Err):
            return restored
        return Ok(context)

    def _restore(self, context: PublishContext, *, switched: bool) -> Result[None, PublishError]:
        if switched:
            back = self._git.checkout(context.current_branch)
            if isinstance(back, Err):
                return _fail(
                    "branch_sync",
                    f"Failed to switch back to branch {context.current_branch}.",
                    back.error,
                )

        if context.stash_taken:
            self._console.info("Applying stashed changes...")
            popped = self._git.stash_pop()
            if isinstance(popped, Err):
                return _fail("branch_sync", "Failed to apply stashed changes.", popped.error)
        return Ok(None)

    def _with_restore(
        self,
        failure: PublishError,
        context: PublishContext,
        *,
        switched: bool,
    ) -> PublishError:
        restored = self._restore(context, switched=switched)
        if isinstance(restored, Err):
            self._console.print(restored.error.pretty(), Style.ERROR)
            hint = restored.error.message
            if failure.hint:
                hint = f"{failure.hint}; {hint}"
            return replace(failure, hint=hint)
        return failure

    def _publish_new_branch(self, context: PublishContext) -> Result[bool, PublishError]:
        """Create the remote branch with upstream tracking when it is missing.

        With pending changes the push waits for the commit so the branch goes
        out once; ``Ok(True)`` means it is still owed.
        """
        cfg = self._config
        branch = context.current_branch
        known = self._git.remote_branch_exists(cfg.remote, branch)
        if isinstance(known, Err):
            return _fail(
                "remote_configuration",
                f"Failed to query {cfg.remote} for branch {branch}.",
                known.error,
            )
        if known.value:
            return Ok(False)
        if context.working_tree_dirty:
            return Ok(True)

        self._console.info(f"Creating {cfg.remote}/{branch}...")
        pushed = self._push_with_retry(branch, what="branch", set_upstream=True)
        if isinstance(pushed, Err):
            return pushed
        return Ok(False)

    # -- branch_ensured -> classified -------------------------------------

    def _classify(self, session: PublishSession) -> _StepResult:
        if not self._git.is_working_tree_dirty():
            decision = self._last_known_decision()
            self._console.info(f"Working tree clean, tagging as {decision.category.value}")
            return Ok(advance(replace(session, state=PublishState.CLASSIFIED, decision=decision)))

        if not self._decisions.confirm("Commit pending changes?"):
            return _fail("commit", "Commit cancelled.")

        category = self._decisions.choose_category()
        description = self._decisions.describe_change().strip()
        if not description:
            return _fail("commit", "Failed to commit changes: empty description.")

        decision = CommitDecision(
            category=category,
            description=description,
            breaking=category is ChangeCategory.FEATURE and is_breaking(description),
            committed=True,
        )

        staged = self._git.stage_all()
        if isinstance(staged, Err):
            return _fail("commit", "Failed to stage changes.", staged.error)
        committed = self._git.commit(decision.message)
        if isinstance(committed, Err):
            return _fail("commit", "Failed to commit changes.", committed.error)

        self._console.success(f"Committed: {decision.message}")
        return Ok(advance(replace(session, state=PublishState.CLASSIFIED, decision=decision)))

    def _last_known_decision(self) -> CommitDecision:
        subject = self._git.head_subject()
        parsed = parse_commit_subject(subject) if subject else None
        if parsed is None:
            return CommitDecision(
                category=NEUTRAL_CATEGORY,
                description=subject or "",
                breaking=False,
                committed=False,
            )
        return CommitDecision(
            category=parsed.category,
            description=parsed.description,
            breaking=parsed.category is ChangeCategory.FEATURE and parsed.breaking,
            committed=False,
        )

    # -- classified -> bumped ---------------------------------------------

    def _bump(self, session: PublishSession) -> _StepResult:
        cfg = self._config
        assert session.decision is not None

        latest = self._git.latest_tag(cfg.primary_branch)
        if latest is None:
            candidate = cfg.initial_version
            self._console.info(f"No existing tags found. Starting with {cfg.tag_name(candidate)}")
            return Ok(advance(replace(session, state=PublishState.BUMPED, candidate=candidate)))

        self._console.info(f"Latest tag found: {latest}")
        parsed = parse_tag(latest)
        if isinstance(parsed, Err):
            return parsed

        base = parsed.value
        candidate = bump(base, session.decision.category, session.decision.breaking)
        bumped = replace(session, state=PublishState.BUMPED, base=base, candidate=candidate)
        return Ok(advance(bumped))

    # -- bumped -> resolved -----------------------------------------------

    def _resolve(self, session: PublishSession) -> _StepResult:
        cfg = self._config
        assert session.candidate is not None

        resolved = resolve_against_remote(
            session.candidate,
            git=self._git,
            remote=cfg.remote,
            tag_prefix=cfg.tag_prefix,
        )
        if isinstance(resolved, Err):
            return resolved

        version = resolved.value
        if version != session.candidate:
            self._console.warning(
                f"{cfg.tag_name(session.candidate)} already exists, using {cfg.tag_name(version)}"
            )
        return Ok(advance(replace(session, state=PublishState.RESOLVED, resolved=version)))

    # -- resolved -> tagged -----------------------------------------------

    def _tag(self, session: PublishSession) -> _StepResult:
        assert session.resolved is not None
        tag = Tag.release(session.resolved, prefix=self._config.tag_prefix)

        self._console.info(f"Tagging commit with {tag.name}")
        created = self._git.create_tag(tag.name, tag.message)
        if isinstance(created, Err):
            return _fail("tag_creation", "Failed to tag the commit.", created.error)
        return Ok(advance(replace(session, state=PublishState.TAGGED, tag=tag)))

    # -- tagged -> pushed -------------------------------------------------

    def _push(self, session: PublishSession) -> _StepResult:
        assert session.context is not None and session.decision is not None
        assert session.tag is not None

        if session.decision.committed or session.upstream_pending:
            branch = session.context.current_branch
            self._console.info(f"Pushing branch {branch}...")
            pushed = self._push_with_retry(
                branch, what="branch", set_upstream=session.upstream_pending
            )
            if isinstance(pushed, Err):
                return pushed

        self._console.info(f"Pushing tag {session.tag.name}...")
        pushed = self._push_with_retry(session.tag.name, what="tag")
        if isinstance(pushed, Err):
            return pushed

        return Ok(advance(replace(session, state=PublishState.PUSHED, upstream_pending=False)))

    def _push_with_retry(
        self, ref: str, *, what: str, set_upstream: bool = False
    ) -> Result[None, PublishError]:
        cfg = self._config

        def on_failure(attempt: int, error: GitError) -> None:
            self._console.warning(
                f"Push of {what} {ref} failed (attempt {attempt}/{cfg.push_attempts})"
            )
            if error.message:
                self._console.print(error.message, Style.DIM)

        pushed = retry(
            lambda: self._git.push(cfg.remote, ref, set_upstream=set_upstream),
            attempts=cfg.push_attempts,
            delay_seconds=cfg.push_delay_seconds,
            on_failure=on_failure,
        )
        if isinstance(pushed, Err):
            return _fail(
                "push_exhausted",
                f"Failed to push {what} {ref} after {cfg.push_attempts} attempts",
                pushed.error,
            )
        return Ok(None)

    # -- pushed -> done ---------------------------------------------------

    def _report(self, session: PublishSession) -> _StepResult:
        assert session.tag is not None
        self._console.success(f"All done! Code is pushed and tagged as {session.tag.name}.")
        return Ok(advance(replace(session, state=PublishState.DONE)))
