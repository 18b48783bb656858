#!/usr/bin/env python3
"""
The state machine of a single pipeline run.

Every run starts at bootstrap. A run ends in either finished or failed.
"""
# Imports:
from __future__ import annotations

# ##-- stdlib imports
import logging as logmod

# ##-- end stdlib imports

# ##-- 3rd party imports
from statemachine import State, StateMachine

# ##-- end 3rd party imports

# ##-- 1st party imports
from bootstage.enums import Stage_e

# ##-- end 1st party imports

##-- logging
logging = logmod.getLogger(__name__)
##-- end logging

class StageMachine(StateMachine):
    """
      Sequences the Bootstrap -> Primary -> Main stages.
      'restart' re-enters bootstrap when its template drifted.
    """
    # State
    bootstrap  = State(initial=True, value=Stage_e.BOOTSTRAP)
    primary    = State(value=Stage_e.PRIMARY)
    main       = State(value=Stage_e.MAIN)
    finished   = State(final=True, value=Stage_e.FINISHED)
    failed     = State(final=True, value=Stage_e.FAILED)

    # Events
    advance    = (bootstrap.to(primary)
                  | primary.to(main)
                  | main.to(finished)
                  )
    restart    = bootstrap.to.itself()
    fail       = failed.from_(bootstrap, primary, main)

    # Listeners
    def after_transition(self, event, source, target):
        logging.debug("Stage Transition: %s -[%s]-> %s", source.id, event, target.id)

    @property
    def stage(self) -> Stage_e:
        return self.current_state.value

    @property
    def is_finished(self) -> bool:
        return self.current_state.value is Stage_e.FINISHED

    @property
    def is_failed(self) -> bool:
        return self.current_state.value is Stage_e.FAILED
