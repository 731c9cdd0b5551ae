"""
Business engine.

Lead recon and package orchestration go through the Gemini REST client;
the remaining studio operations are placeholders that return empty values.
"""
import json
import logging
import threading
from typing import Any, Dict, List, Optional

from ..models.models import AssetRecord, BenchmarkReport, EngineResult, Lead, VeoConfig
from .gemini import JSON_MIME, GeminiRestClient, get_client
from .production import Production, get_production

logger = logging.getLogger(__name__)

_engine: Optional["Engine"] = None
_engine_lock = threading.Lock()

LEAD_SCOUT_INSTRUCTION = "You are a professional lead gen scout. Output ONLY JSON."
STRATEGIST_INSTRUCTION = "You are a senior agency strategist. Return valid JSON only."


class Engine:
    def __init__(self, production: Production, gemini: GeminiRestClient):
        self.production = production
        self.gemini = gemini

    def _log(self, message: str) -> None:
        self.production.push_log(message)

    def generate_leads(self, market: str, niche: str, count: int) -> EngineResult:
        self._log(f"RECON_START: Scanning {market} for {niche}")
        prompt = (
            f"Find {count} high-ticket businesses in {market} specifically in the {niche} niche "
            "that could benefit from AI transformation. Return JSON matching the defined schema."
        )
        try:
            result = self.gemini.generate(
                prompt, response_type=JSON_MIME, system_instruction=LEAD_SCOUT_INSTRUCTION
            )
            data = json.loads(result.text)
            engine_result = EngineResult.model_validate(data)
        except Exception as e:
            logger.info("lead recon failed: %s", e)
            self._log(f"RECON_FAULT: {e}")
            return EngineResult()
        self._log(f"RECON_SUCCESS: Identified {len(engine_result.leads)} targets.")
        return engine_result

    def orchestrate_business_package(self, lead: Lead, assets: List[AssetRecord]) -> Dict[str, Any]:
        self._log(f"FORGE_INIT: Orchestrating for {lead.business_name}")
        prompt = (
            f"Perform exhaustive strategy for {lead.business_name}. Return JSON with narrative, "
            "presentation, funnel, outreach, contentPack, and visualDirection."
        )
        try:
            result = self.gemini.generate(
                prompt, response_type=JSON_MIME, system_instruction=STRATEGIST_INSTRUCTION
            )
            package = json.loads(result.text)
        except Exception as e:
            self._log(f"FORGE_FAULT: {e}")
            return {}
        if not isinstance(package, dict):
            self._log("FORGE_FAULT: expected a JSON object")
            return {}
        return package

    def grounded_lead_search(self, query: str, market: str, count: int) -> EngineResult:
        return self.generate_leads(market, query, count)

    def logged_generate_content(self, params: Dict[str, Any]) -> str:
        return self.gemini.generate(params["contents"], response_type=JSON_MIME).text

    def save_asset(
        self,
        type: str,
        title: str,
        data: str,
        module: str,
        lead_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AssetRecord:
        return self.production.save_asset(type, title, data, module, lead_id=lead_id, metadata=metadata)

    # placeholders

    def architect_funnel(self, lead: Lead) -> List[Any]:
        return []

    def architect_pitch_deck(self, lead: Lead) -> Dict[str, Any]:
        return {"slides": []}

    def generate_task_matrix(self, lead: Lead) -> List[Any]:
        return []

    def generate_pitch(self, lead: Lead) -> str:
        return ""

    def generate_proposal_draft(self, lead: Lead) -> str:
        return ""

    def generate_outreach_sequence(self, lead: Lead) -> List[Any]:
        return []

    def fetch_live_intel(self, lead: Lead, module: str) -> Dict[str, Any]:
        return {}

    def analyze_ledger(self, leads: List[Lead]) -> Dict[str, str]:
        return {"risk": "", "opportunity": ""}

    def fetch_benchmark_data(self, lead: Lead) -> BenchmarkReport:
        return BenchmarkReport()

    def extract_brand_dna(self, lead: Lead, url: str) -> Dict[str, Any]:
        return {}

    def generate_visual(self, prompt: str, lead: Optional[Lead] = None, style: Optional[str] = None) -> str:
        return ""

    def generate_mockup(self, business_name: str, niche: str, lead_id: str) -> str:
        return ""

    def generate_flash_sparks(self, lead: Lead) -> List[Any]:
        return []

    def generate_roi_report(self, leads: int, value: float, conversion: float) -> str:
        return ""

    def generate_nurture_dialogue(self, lead: Lead, scenario: str) -> List[Any]:
        return []

    def synthesize_product(self, lead: Lead) -> Dict[str, Any]:
        return {}

    def open_router_chat(self, prompt: str, system: Optional[str] = None) -> str:
        return ""

    def perform_fact_check(self, lead: Lead, claim: str) -> Dict[str, Any]:
        return {}

    def translate_tactical(self, text: str, language: str) -> str:
        return ""

    def analyze_visual(self, base64_data: str, mime_type: str, prompt: str) -> str:
        return ""

    def analyze_video_url(self, url: str, mission: str, lead_id: Optional[str] = None) -> str:
        return ""

    def generate_video_payload(
        self,
        prompt: str,
        lead_id: Optional[str] = None,
        start_image: Optional[str] = None,
        last_frame: Optional[str] = None,
        config: Optional[VeoConfig] = None,
    ) -> str:
        return ""

    def enhance_video_prompt(self, prompt: str) -> str:
        return ""

    def generate_motion_lab_concept(self, lead: Lead) -> Dict[str, Any]:
        return {}

    def generate_agency_identity(self, niche: str, region: str) -> Dict[str, Any]:
        return {}

    def fetch_viral_pulse_data(self, niche: str) -> List[Any]:
        return []

    def query_realtime_agent(self, prompt: str) -> Dict[str, Any]:
        return {"text": "", "sources": []}

    def test_model_performance(self, model: str, prompt: str) -> str:
        return ""

    def get_stored_keys(self) -> Dict[str, str]:
        return {"openRouter": "", "kie": ""}

    def set_stored_keys(self, open_router: str, kie: str) -> bool:
        return True

    def generate_affiliate_program(self, niche: str) -> Dict[str, Any]:
        return {}

    def synthesize_article(self, source: str, mode: str) -> str:
        return ""

    def crawl_theater_signals(self, sector: str, signal: str) -> List[Any]:
        return []

    def identify_sub_regions(self, theater: str) -> List[Any]:
        return []

    def simulate_sandbox(self, lead: Lead, ltv: float, volume: float) -> str:
        return ""

    def generate_playbook_strategy(self, niche: str) -> Dict[str, Any]:
        return {}

    def fetch_token_stats(self) -> Dict[str, Any]:
        return {"recentOps": []}

    def critique_video_presence(self, lead: Lead) -> str:
        return ""

    def generate_audio_pitch(
        self,
        script: str,
        voice: str,
        lead_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        return ""

    def enhance_strategic_prompt(self, prompt: str) -> str:
        return ""


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = Engine(get_production(), get_client())
    return _engine
