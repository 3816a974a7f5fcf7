from gridlearn.app.fsm import TrainingStateMachine, TrainingState


def test_starts_idle():
    fsm = TrainingStateMachine()
    assert fsm.is_idle()
    assert fsm.can_start()
    assert not fsm.is_active()


def test_run_lifecycle():
    fsm = TrainingStateMachine()
    assert fsm.start_training()
    assert fsm.is_training()
    assert not fsm.can_start()

    assert fsm.request_stop()
    assert fsm.current_state == TrainingState.STOPPING
    assert fsm.is_active()
    assert not fsm.can_start()

    assert fsm.reset_to_idle()
    assert fsm.can_start()


def test_overlapping_start_rejected():
    fsm = TrainingStateMachine()
    fsm.start_training()
    assert not fsm.start_training()
    assert fsm.is_training()


def test_stop_requires_running():
    fsm = TrainingStateMachine()
    assert not fsm.request_stop()
    assert fsm.is_idle()


def test_error_returns_to_idle():
    fsm = TrainingStateMachine()
    fsm.start_training()
    assert fsm.fail_error()
    assert not fsm.can_start()
    assert not fsm.start_training()
    assert fsm.reset_to_idle()
    assert fsm.is_idle()


def test_enter_callbacks_receive_context():
    fsm = TrainingStateMachine()
    seen = []
    fsm.on_state_enter(TrainingState.TRAINING, seen.append)
    fsm.start_training({"episodes": 3})
    assert seen == [{"episodes": 3}]


def test_state_descriptions():
    fsm = TrainingStateMachine()
    assert fsm.get_state_description().startswith("Ready")
    fsm.start_training()
    assert "Training" in fsm.get_state_description()
