import streamlit as st
import plotly.graph_objects as go
import numpy as np
from datetime import date
from typing import Any, Dict, List

from nftcast import DataPreparation, ForecastingEngine, ModelKind, ModelResult, OpenSeaClient, ResultsExporter
from nftcast.marketplace import MarketplaceError
from nftcast.types import HistoricalSeries

# Configure Streamlit page
st.set_page_config(
    page_title="🔮 NFT Price Forecast Dashboard",
    page_icon="🔮",
    layout="wide",
    initial_sidebar_state="expanded",
)


class ForecastDashboard:
    """
    NFT Price Forecast Dashboard using Streamlit and Plotly
    """

    def __init__(self):
        self.model_colors = {
            "XGBoost": "#F18F01",
            "LSTM": "#C73E1D",
            "Random Forest": "#3B1F2B",
            "ARIMA": "#6A994E",
            "Ensemble": "#7B2CBF",
        }
        self.exporter = ResultsExporter()

    def create_inputs_sidebar(self) -> Dict[str, Any]:
        """
        Create sidebar inputs

        Returns:
            Dictionary of input selections
        """
        st.sidebar.title("🎛️ Forecast Settings")

        st.sidebar.subheader("🖼️ NFT")
        identifier = st.sidebar.text_input(
            "OpenSea URL or collection slug:",
            placeholder="https://opensea.io/assets/ethereum/0x.../1234",
            key="identifier",
        )
        base_price = st.sidebar.number_input("Base price (ETH):", min_value=0.01, value=45.2, step=0.1)

        st.sidebar.subheader("📅 History")
        months = st.sidebar.slider("Months of history:", min_value=1, max_value=36, value=12)

        st.sidebar.subheader("🔮 Forecast Options")
        horizon = st.sidebar.slider("Months to forecast:", min_value=1, max_value=12, value=5)
        selected_models = st.sidebar.multiselect(
            "Models:",
            options=[kind.label for kind in ModelKind],
            default=[kind.label for kind in ModelKind],
            key="model_filter",
        )
        seed = st.sidebar.number_input("Random seed:", min_value=0, value=42, step=1)

        return {
            "identifier": identifier.strip(),
            "base_price": float(base_price),
            "months": int(months),
            "horizon": int(horizon),
            "models": [kind for kind in ModelKind if kind.label in selected_models],
            "seed": int(seed),
        }

    def resolve_base_price(self, inputs: Dict[str, Any]) -> float:
        """Use the collection floor price when an identifier is given and resolvable"""
        if not inputs["identifier"]:
            return inputs["base_price"]

        try:
            floor_price = OpenSeaClient().resolve_floor_price(inputs["identifier"])
        except MarketplaceError as e:
            st.sidebar.error(f"❌ {e}")
            return inputs["base_price"]

        if floor_price <= 0:
            st.sidebar.warning("⚠️ No floor price available, using the base price")
            return inputs["base_price"]

        st.sidebar.success(f"✅ Floor price: {floor_price:.4f} ETH")
        return floor_price

    def create_price_chart(self, history: HistoricalSeries, results: List[ModelResult]) -> None:
        """Historical prices with one forecast line per model"""
        st.subheader("📈 Price History and Forecasts")

        history_data = DataPreparation.history_frame(history)
        fig = go.Figure()

        fig.add_trace(
            go.Scatter(
                x=history_data["date"],
                y=history_data["price"],
                mode="lines+markers",
                name="Historical",
                line=dict(color="#2E86AB", width=2),
                marker=dict(size=4),
                hovertemplate="<b>Historical</b><br>Date: %{x}<br>Price: %{y:,.4f}<extra></extra>",
            )
        )

        for result in results:
            forecast_data = result.to_frame()
            fig.add_trace(
                go.Scatter(
                    x=forecast_data["date"],
                    y=forecast_data["price"],
                    mode="lines+markers",
                    name=result.model_name,
                    line=dict(
                        color=self.model_colors.get(result.model_name),
                        width=3 if result.model_name == "Ensemble" else 2,
                        dash="solid" if result.model_name == "Ensemble" else "dash",
                    ),
                    hovertemplate=f"<b>{result.model_name}</b><br>Date: %{{x}}<br>Price: %{{y:,.4f}}<extra></extra>",
                )
            )

        fig.update_layout(
            xaxis_title="Date",
            yaxis_title="Price (ETH)",
            hovermode="x unified",
            height=500,
            legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        )
        st.plotly_chart(fig, width="stretch")

    def create_model_charts(self, results: List[ModelResult]) -> None:
        """Accuracy tags and confidence decay side by side"""
        col1, col2 = st.columns(2)

        with col1:
            st.subheader("🎯 Model Accuracy")
            fig_accuracy = go.Figure(
                go.Bar(
                    x=[result.model_name for result in results],
                    y=[result.accuracy * 100 for result in results],
                    marker_color=[self.model_colors.get(result.model_name) for result in results],
                    hovertemplate="<b>%{x}</b><br>Accuracy: %{y:.0f}%<extra></extra>",
                )
            )
            fig_accuracy.update_layout(yaxis_title="Accuracy (%)", yaxis_range=[0, 100], height=400)
            st.plotly_chart(fig_accuracy, use_container_width=True)

        with col2:
            st.subheader("📉 Confidence Decay")
            fig_confidence = go.Figure()
            for result in results:
                fig_confidence.add_trace(
                    go.Scatter(
                        x=np.arange(1, len(result.predictions) + 1),
                        y=np.array(result.confidences) * 100,
                        mode="lines+markers",
                        name=result.model_name,
                        line=dict(color=self.model_colors.get(result.model_name)),
                    )
                )
            fig_confidence.update_layout(
                xaxis_title="Months ahead", yaxis_title="Confidence (%)", yaxis_range=[50, 100], height=400
            )
            st.plotly_chart(fig_confidence, use_container_width=True)

    def display_key_metrics(self, history: HistoricalSeries, results: List[ModelResult]) -> None:
        st.markdown("### 📊 Key Metrics Overview")
        col1, col2, col3 = st.columns(3)

        last_price = history[-1].price if history else None
        ensemble = next((result for result in results if result.model_name == "Ensemble"), None)

        with col1:
            st.metric("💰 Last Price", f"{last_price:.4f}" if last_price else "n/a")
        with col2:
            if ensemble is not None and last_price:
                change = (ensemble.final_price - last_price) / last_price
                st.metric("🔮 Ensemble Target", f"{ensemble.final_price:.4f}", f"{change:+.1%}")
            else:
                st.metric("🔮 Ensemble Target", "n/a")
        with col3:
            st.metric("🧮 Models", len(results))

    def create_results_table(self, history: HistoricalSeries, results: List[ModelResult]) -> None:
        st.subheader("📋 Model Summary")
        summary = self.exporter.summarize(results)
        st.dataframe(summary, use_container_width=True, hide_index=True)

        final_data = self.exporter.create_final_dataset(history, results)
        st.download_button(
            label="📥 Download Forecast CSV",
            data=final_data.to_csv(index=False).encode("utf-8"),
            file_name="forecast.csv",
            mime="text/csv",
        )

    def run_dashboard(self) -> None:
        """
        Main method to run the dashboard
        """
        st.title("🔮 NFT Price Forecast Dashboard")
        st.markdown("*Heuristic price projections anchored at the collection floor price*")
        st.markdown("---")

        inputs = self.create_inputs_sidebar()
        if not inputs["models"]:
            st.error("❌ Select at least one model.")
            return

        base_price = self.resolve_base_price(inputs)
        rng = np.random.default_rng(inputs["seed"])
        as_of = date.today()

        with st.spinner("🔄 Running forecasts..."):
            history = DataPreparation().generate_mock_history(
                months=inputs["months"], base_price=base_price, rng=rng, as_of=as_of
            )
            engine = ForecastingEngine(history, rng=rng)
            results = [engine.forecast(kind, inputs["horizon"], as_of=as_of) for kind in inputs["models"]]

        self.display_key_metrics(history, results)
        self.create_price_chart(history, results)
        self.create_model_charts(results)
        self.create_results_table(history, results)

        st.markdown("---")
        st.markdown("*Forecasts are heuristic projections, not financial advice. Built with Streamlit & Plotly*")


def main():
    """
    Entry point for the Streamlit application
    """
    dashboard = ForecastDashboard()
    dashboard.run_dashboard()


if __name__ == "__main__":
    main()
