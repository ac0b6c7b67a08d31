"""End-to-end tests: full interviews through the turn dispatcher."""
import pytest

from bot_main import ImcBot, main
from core.observability import metrics
from models.session import FlowStep, Sex, UserProfile
from services.state_store import StateStore


@pytest.fixture
def bot():
    metrics.reset()
    return ImcBot(StateStore(persist=False))


def _say(bot, user_id, text):
    return [m.render() for m in bot.process(user_id, text)]


class TestFullInterview:

    def test_ana_scenario(self, bot):
        assert _say(bot, "ana", "oi") == ["Por favor, insira seu nome."]
        assert _say(bot, "ana", "Ana") == [
            "Obrigado, Ana.",
            "Selecione seu sexo. (1) Masculino ou (2) Feminino",
        ]
        assert _say(bot, "ana", "Feminino") == ["Insira sua Altura."]
        assert _say(bot, "ana", "165") == ["Informe seu peso."]

        final = _say(bot, "ana", "55")
        assert len(final) == 1
        summary = final[0]
        for part in ["Ana", "Feminino", "165", "55", str(55 / (165 * 165)), "Abaixo do peso"]:
            assert part in summary

        assert bot.store.get_profile("ana") == UserProfile("Ana", Sex.FEMALE, 165, 55)
        assert bot.store.get_flow_state("ana") is None

    def test_retries_do_not_advance(self, bot):
        _say(bot, "u", "oi")
        _say(bot, "u", "Rui")
        assert _say(bot, "u", "talvez") == ["Selecione seu sexo. (1) Masculino ou (2) Feminino"]
        assert bot.store.get_flow_state("u").step is FlowStep.ASK_SEX

        _say(bot, "u", "1")
        assert _say(bot, "u", "-3") == ["A altura deve ser maior que 0.", "Insira sua Altura."]
        assert _say(bot, "u", "abc") == ["A altura deve ser maior que 0.", "Insira sua Altura."]
        assert bot.store.get_flow_state("u").step is FlowStep.ASK_HEIGHT

        _say(bot, "u", "180")
        assert _say(bot, "u", "0") == ["O peso deve ser maior que 0.", "Informe seu peso."]
        final = _say(bot, "u", "90 kg")
        assert "Sexo: Masculino" in final[0]

        summary = bot.get_metrics()
        assert summary["completed_flows"] == 1
        assert summary["validation_retries"] == {"ask_sex": 1, "ask_height": 2, "ask_weight": 1}

    def test_second_interview_overwrites_profile(self, bot):
        for text in ["oi", "Ana", "2", "165", "55"]:
            _say(bot, "ana", text)
        for text in ["de novo", "Ana Paula", "Feminino", "166", "58"]:
            _say(bot, "ana", text)
        assert bot.store.get_profile("ana") == UserProfile("Ana Paula", Sex.FEMALE, 166, 58)

    def test_users_do_not_share_state(self, bot):
        _say(bot, "a", "oi")
        _say(bot, "a", "Ana")
        assert _say(bot, "b", "oi") == ["Por favor, insira seu nome."]
        assert bot.store.get_flow_state("a").accumulator.name == "Ana"
        assert bot.store.get_flow_state("b").accumulator.name is None

    def test_reset_abandons_interview(self, bot):
        _say(bot, "u", "oi")
        _say(bot, "u", "Ana")
        assert bot.reset("u") is True
        assert _say(bot, "u", "Feminino") == ["Por favor, insira seu nome."]


class TestResume:

    def test_resumes_after_restart(self, tmp_path):
        first = ImcBot(StateStore(persist=True, storage_dir=tmp_path))
        for text in ["oi", "Ana", "Feminino"]:
            _say(first, "ana", text)

        second = ImcBot(StateStore(persist=True, storage_dir=tmp_path))
        assert second.store.get_flow_state("ana").step is FlowStep.ASK_HEIGHT
        assert _say(second, "ana", "165") == ["Informe seu peso."]
        _say(second, "ana", "55")
        assert not (tmp_path / "ana.flow.json").exists()
        assert (tmp_path / "ana.profile.json").exists()

    @pytest.mark.parametrize("user_id", ["team/ana", "../escaped"])
    def test_path_like_ids_complete_an_interview(self, tmp_path, user_id):
        bot = ImcBot(StateStore(persist=True, storage_dir=tmp_path / "state"))
        for text in ["oi", "Ana", "Feminino", "165"]:
            _say(bot, user_id, text)
        assert "Resultado: Abaixo do peso" in _say(bot, user_id, "55")[0]
        assert sorted(p.name for p in tmp_path.iterdir()) == ["state"]
        assert bot.store.get_profile(user_id) == UserProfile("Ana", Sex.FEMALE, 165, 55)

    def test_created_at_is_kept_across_turns(self, bot):
        _say(bot, "u", "oi")
        created = bot.store.get_flow_state("u").created_at
        _say(bot, "u", "Ana")
        assert bot.store.get_flow_state("u").created_at == created


class TestConsole:

    def test_repl_runs_an_interview(self, monkeypatch, capsys):
        replies = iter(["oi", "Ana", "Feminino", "165", "55", "exit"])
        monkeypatch.setattr("builtins.input", lambda _prompt="": next(replies))

        main(["--no-persist", "--user", "console"])

        out = capsys.readouterr().out
        assert "Bot: Por favor, insira seu nome." in out
        assert "Bot: Selecione seu sexo. (1) Masculino ou (2) Feminino" in out
        assert "+=====DADOS SALVOS=====+" in out
        assert "Resultado: Abaixo do peso" in out
